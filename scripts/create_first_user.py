import os
import sys

from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from pulse.db.session import engine, init_db
from pulse.models.user import User, UserRole
from pulse.core.security import get_password_hash

def create_initial_user():
    print("--- Initial User Creation ---")

    email = os.environ.get("FIRST_USER_EMAIL", "admin@example.com")
    password = os.environ.get("FIRST_USER_PASSWORD", "adminpassword")
    full_name = "Super Admin"

    roles = [UserRole.USER, UserRole.SUPER_ADMIN]

    init_db()
    with Session(engine) as session:
        # Check if user already exists
        statement = select(User).where(User.email == email)
        user = session.exec(statement).first()

        if user:
            print(f"User with email {email} already exists.")
            return

        print(f"Creating user {email}...")
        db_user = User(
            email=email,
            password=get_password_hash(password),
            full_name=full_name,
            roles=roles
        )
        session.add(db_user)
        session.commit()
        print("Initial user created successfully!")
        print(f"Email: {email}")
        print(f"Roles: {[r.value for r in roles]}")

if __name__ == "__main__":
    create_initial_user()

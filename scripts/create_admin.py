"""Script to create the initial admin user."""
import argparse
import getpass
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError as SchemaValidationError

from stockflow.config import settings
from stockflow.database import Base, create_db_engine, create_session_factory
from stockflow.exceptions import ValidationError
from stockflow.models.user import User
from stockflow.schemas.user import UserCreate
from stockflow.services.users import create_user


def create_admin(email: str, password: str, first_name: str, last_name: str) -> int:
    """Create an active admin user if no admin exists yet."""
    engine = create_db_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)

    db = create_session_factory(engine)()
    try:
        admin = db.query(User).filter(User.is_admin.is_(True)).first()
        if admin:
            print(f"Admin user already exists: {admin.email}")
            return 0

        try:
            user_data = UserCreate(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                is_admin=True,
                is_active=True,
            )
        except SchemaValidationError as exc:
            reasons = "; ".join(f"{'.'.join(map(str, error['loc']))}: {error['msg']}" for error in exc.errors())
            print(f"Could not create admin: {reasons}")
            return 1

        try:
            user = create_user(db, user_data)
        except ValidationError as exc:
            print(f"Could not create admin: {exc.message}")
            return 1

        print("Admin user created successfully!")
        print(f"Email: {user.email}")
        return 0
    finally:
        db.close()
        engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the initial StockFlow admin user")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@stockflow.io"))
    parser.add_argument("--first-name", default="System")
    parser.add_argument("--last-name", default="Administrator")
    args = parser.parse_args()

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    return create_admin(args.email, password, args.first_name, args.last_name)


if __name__ == "__main__":
    sys.exit(main())

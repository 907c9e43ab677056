"""
Create the first admin account.

/api/admin/addnew needs an admin session, so the very first admin has to be
created directly against the database:

    python scripts/create_admin.py --email admin@clinic.test --first-name Admin ...
"""
import argparse
import getpass
import sys
from pathlib import Path

# Allow running from a checkout without installing the package
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from clinic_api.core.database import SessionLocal, init_db
from clinic_api.core.security import UserRole
from clinic_api.schemas.user import AdminCreate
from clinic_api.services.auth_service import AuthService


def parse_args():
    parser = argparse.ArgumentParser(description="Create a clinic admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--phone", required=True)
    parser.add_argument("--nic", required=True)
    parser.add_argument("--dob", required=True, help="YYYY-MM-DD")
    parser.add_argument("--gender", required=True, choices=["Male", "Female"])
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    password = getpass.getpass("Password: ")

    admin_data = AdminCreate(
        email=args.email,
        first_name=args.first_name,
        last_name=args.last_name,
        phone=args.phone,
        nic=args.nic,
        dob=args.dob,
        gender=args.gender,
        password=password,
    )

    init_db()
    db = SessionLocal()
    try:
        admin = AuthService(db).add_staff_member(admin_data, UserRole.ADMIN)
    finally:
        db.close()

    print(f"Created admin {admin.email} ({admin.id})")


if __name__ == "__main__":
    main()

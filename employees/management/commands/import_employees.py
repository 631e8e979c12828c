import csv
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model
from django.db import transaction

from employees.models import Department, Employee
from employees.utils import generate_employee_id, generate_username

User = get_user_model()

REQUIRED_COLUMNS = {
    "first_name",
    "last_name",
    "email",
    "department",
    "position",
    "hire_date",
    "salary",
}

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y")


def parse_date(raw):
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def normalize_header(header):
    return header.replace("\ufeff", "").strip().lower()


class Command(BaseCommand):
    help = "Import existing employees from a CSV file"

    def add_arguments(self, parser):
        parser.add_argument("csv_path", help="Path to the employees CSV")

    @transaction.atomic
    def handle(self, *args, **options):
        path = options["csv_path"]
        imported = skipped = 0

        try:
            f = open(path, newline="", encoding="utf-8")
        except OSError as e:
            raise CommandError(f"Cannot open {path}: {e}")

        with f:
            reader = csv.DictReader(f)
            if not reader.fieldnames:
                raise CommandError("CSV file has no header row")

            # Excel exports may carry a BOM and stray spaces
            reader.fieldnames = [normalize_header(h) for h in reader.fieldnames]

            missing = REQUIRED_COLUMNS - set(reader.fieldnames)
            if missing:
                raise CommandError(
                    f"CSV missing columns: {', '.join(sorted(missing))}")

            for line_no, raw_row in enumerate(reader, start=2):
                if not any(raw_row.values()):
                    continue

                row = {k: (v or "").strip() for k, v in raw_row.items() if k}
                email = row["email"].lower()
                employee_id = row.get("employee_id", "")

                if not email:
                    self.stdout.write(self.style.ERROR(
                        f"Line {line_no}: skipped, email is empty"))
                    skipped += 1
                    continue

                if User.objects.filter(email__iexact=email).exists():
                    self.stdout.write(self.style.WARNING(
                        f"Line {line_no}: skipped existing user {email}"))
                    skipped += 1
                    continue

                if employee_id and Employee.objects.filter(employee_id=employee_id).exists():
                    self.stdout.write(self.style.WARNING(
                        f"Line {line_no}: skipped existing employee id {employee_id}"))
                    skipped += 1
                    continue

                hire_date = parse_date(row["hire_date"])
                if not hire_date:
                    raise CommandError(
                        f"Line {line_no}: invalid hire_date '{row['hire_date']}', "
                        f"expected YYYY-MM-DD or DD-MM-YYYY")

                try:
                    salary = Decimal(row["salary"])
                except InvalidOperation:
                    raise CommandError(
                        f"Line {line_no}: invalid salary '{row['salary']}'")

                role = (row.get("role") or User.ROLE_EMPLOYEE).lower()
                if role not in dict(User.ROLE_CHOICES):
                    raise CommandError(f"Line {line_no}: unknown role '{role}'")

                department, created = Department.objects.get_or_create(
                    name=row["department"])
                if created:
                    self.stdout.write(self.style.WARNING(
                        f"Created department: {department.name}"))

                user = User.objects.create_user(
                    username=row.get("username") or generate_username(
                        row["first_name"], row["last_name"]),
                    email=email,
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                    role=role,
                )
                # imported staff set their password through an admin reset
                user.set_unusable_password()
                user.save(update_fields=["password"])

                employee = Employee.objects.create(
                    user=user,
                    employee_id=employee_id or generate_employee_id(),
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                    phone_number=row.get("phone_number", ""),
                    department=department,
                    position=row["position"],
                    hire_date=hire_date,
                    salary=salary,
                )
                imported += 1
                self.stdout.write(self.style.SUCCESS(
                    f"Imported: {employee.employee_id} | {email}"))

        self.stdout.write(self.style.SUCCESS(
            f"Done. Imported {imported}, skipped {skipped}."))

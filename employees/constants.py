# employees/constants.py

EMPLOYMENT_TYPE_CHOICES = [
    ("FULL_TIME", "Full Time"),
    ("PART_TIME", "Part Time"),
    ("CONTRACT", "Contract"),
    ("INTERN", "Intern"),
]

# Fields an employee may change on their own record
CONTACT_FIELDS = (
    "phone_number",
    "address",
    "emergency_contact",
    "emergency_phone",
)

# Managers may also change job details, but not pay or account status
MANAGER_FIELDS = CONTACT_FIELDS + (
    "first_name",
    "last_name",
    "date_of_birth",
    "department",
    "position",
    "employment_type",
    "hire_date",
    "exit_date",
    "metadata",
)

ADMIN_FIELDS = MANAGER_FIELDS + (
    "employee_id",
    "salary",
    "is_active",
)

from datetime import time

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .models import Attendance, AttendanceRegularizationRequest


def late_cutoff():
    hours, minutes = settings.HRMS_SETTINGS["LATE_CHECK_IN_AFTER"].split(":")
    return time(int(hours), int(minutes))


class AttendanceService:

    @staticmethod
    @transaction.atomic
    def check_in(employee, location="", notes="", now=None):
        now = now or timezone.now()
        today = timezone.localdate(now)

        att = Attendance.objects.select_for_update().filter(
            employee=employee, date=today).first()
        if att and att.check_in:
            raise ValidationError("Already checked in today")

        if timezone.localtime(now).time() > late_cutoff():
            status = Attendance.STATUS_LATE
        else:
            status = Attendance.STATUS_PRESENT

        if att is None:
            att = Attendance(employee=employee, date=today)
        att.check_in = now
        att.status = status
        att.check_in_location = location or ""
        if notes:
            att.notes = notes
        att.save()
        return att

    @staticmethod
    @transaction.atomic
    def check_out(employee, location="", notes="", now=None):
        now = now or timezone.now()
        today = timezone.localdate(now)

        att = Attendance.objects.select_for_update().filter(
            employee=employee, date=today).first()
        if att and att.check_out:
            raise ValidationError("Already checked out today")

        # a forgotten check-in still records the check-out
        if att is None:
            att = Attendance(employee=employee, date=today,
                             status=Attendance.STATUS_PRESENT)
        att.check_out = now
        att.check_out_location = location or ""
        if notes:
            att.notes = f"{att.notes}\n{notes}".strip() if att.notes else notes
        att.save()
        return att


class AttendanceCorrectionService:

    @staticmethod
    def correct_attendance(attendance, data, corrected_by):
        """
        Manager/admin correction of a single attendance row.
        `data` is validated serializer data: check_in, check_out, status, notes.
        """
        check_in = data.get("check_in")
        check_out = data.get("check_out")
        status = data.get("status")
        note = data.get("notes") or "Corrected"

        if check_in:
            new_date = timezone.localdate(check_in)
            if new_date != attendance.date:
                # Same employee cannot have 2 records on same date
                conflict_exists = Attendance.objects.filter(
                    employee=attendance.employee,
                    date=new_date
                ).exclude(id=attendance.id).exists()
                if conflict_exists:
                    raise ValidationError(
                        f"Attendance for {new_date} already exists.")
                attendance.date = new_date
            attendance.check_in = check_in

        if check_out:
            attendance.check_out = check_out

        if (attendance.check_in and attendance.check_out
                and attendance.check_out <= attendance.check_in):
            raise ValidationError("Check-out must be after check-in.")

        if status:
            attendance.status = status

        audit_note = f"Correction by {corrected_by.username}: {note}"
        if not attendance.notes:
            attendance.notes = audit_note
        elif audit_note not in attendance.notes:
            attendance.notes += f"\n{audit_note}"

        attendance.save()
        return attendance


class RegularizationService:

    @staticmethod
    @transaction.atomic
    def review(request_obj, reviewer, status, comments=""):
        if request_obj.status != AttendanceRegularizationRequest.STATUS_PENDING:
            raise ValidationError("Only pending requests can be reviewed.")
        if status not in (AttendanceRegularizationRequest.STATUS_APPROVED,
                          AttendanceRegularizationRequest.STATUS_REJECTED):
            raise ValidationError("Status must be APPROVED or REJECTED.")

        now = timezone.now()
        request_obj.status = status
        request_obj.reviewed_by = reviewer
        request_obj.reviewed_at = now
        request_obj.review_comments = comments or ""
        request_obj.save()

        if status == AttendanceRegularizationRequest.STATUS_APPROVED:
            att, _ = Attendance.objects.get_or_create(
                employee=request_obj.employee,
                date=request_obj.date,
                defaults={"status": Attendance.STATUS_PRESENT},
            )
            att.is_regularized = True
            att.regularized_by = reviewer
            att.regularized_at = now
            att.save(update_fields=["is_regularized", "regularized_by",
                                    "regularized_at", "updated_at"])

        return request_obj

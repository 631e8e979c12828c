from datetime import date

import pytest
from django.urls import reverse

from performance.models import PerformanceGoal, PerformanceReview, ReviewCycle


@pytest.fixture
def cycle(admin_user):
    return ReviewCycle.objects.create(
        name="H1 2024", type="MID_YEAR", start_date=date(2024, 1, 1),
        end_date=date(2024, 6, 30), created_by=admin_user)


@pytest.fixture
def goal(employee):
    return PerformanceGoal.objects.create(
        employee=employee, title="Ship the payroll export",
        start_date=date(2024, 1, 1), end_date=date(2024, 3, 31))


@pytest.mark.django_db
class TestCycles:

    def test_admin_creates(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("review-cycles"), {
            "name": "FY24", "type": "ANNUAL",
            "start_date": "2024-04-01", "end_date": "2025-03-31"})
        assert response.status_code == 201
        assert response.data["status"] == "ACTIVE"
        assert response.data["created_by"] == admin_user.pk

    def test_end_after_start(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("review-cycles"), {
            "name": "Bad", "type": "ANNUAL",
            "start_date": "2024-04-01", "end_date": "2024-04-01"})
        assert response.status_code == 400

    def test_manager_cannot_create(self, client_for, manager_user):
        response = client_for(manager_user).post(reverse("review-cycles"), {
            "name": "FY24", "type": "ANNUAL",
            "start_date": "2024-04-01", "end_date": "2025-03-31"})
        assert response.status_code == 403

    def test_cannot_delete_cycle_with_reviews(self, client_for, admin_user, cycle, employee):
        PerformanceReview.objects.create(employee=employee, cycle=cycle, review_type="MID_YEAR")
        url = reverse("review-cycle-detail", args=[cycle.pk])
        client = client_for(admin_user)

        assert client.get(url).data["review_count"] == 1
        assert client.delete(url).status_code == 400

        PerformanceReview.objects.all().delete()
        assert client.delete(url).status_code == 204


@pytest.mark.django_db
class TestGoals:

    def test_employee_creates_own_goal(self, client_for, employee_user, employee, other_employee):
        response = client_for(employee_user).post(reverse("goals"), {
            "employee": other_employee.pk, "title": "Learn Django",
            "start_date": "2024-01-01", "end_date": "2024-12-31"}, format="json")
        assert response.status_code == 201
        assert response.data["employee"] == employee.pk

    def test_manager_sets_goal_for_employee(self, client_for, manager_user, employee):
        response = client_for(manager_user).post(reverse("goals"), {
            "employee": employee.pk, "title": "Mentor an intern",
            "start_date": "2024-01-01", "end_date": "2024-12-31"}, format="json")
        assert response.status_code == 201
        assert response.data["employee"] == employee.pk

    def test_goal_created_completed(self, client_for, employee_user, employee):
        response = client_for(employee_user).post(reverse("goals"), {
            "title": "Already done", "status": "COMPLETED",
            "start_date": "2024-01-01", "end_date": "2024-01-31"}, format="json")
        assert response.data["progress"] == 100
        assert response.data["completion_date"] is not None

    def test_progress_update_completes_goal(self, client_for, employee_user, goal):
        client = client_for(employee_user)
        url = reverse("goal-updates", args=[goal.pk])

        halfway = client.post(url, {"update_text": "Draft ready", "progress": 50})
        assert halfway.status_code == 201
        assert halfway.data["goal_status"] == "ACTIVE"

        done = client.post(url, {"update_text": "Shipped", "progress": 100})
        assert done.data["goal_status"] == "COMPLETED"
        goal.refresh_from_db()
        assert goal.completion_date is not None

        detail = client.get(reverse("goal-detail", args=[goal.pk]))
        assert len(detail.data["updates"]) == 2

    def test_progress_is_bounded(self, client_for, employee_user, goal):
        response = client_for(employee_user).post(
            reverse("goal-updates", args=[goal.pk]), {"update_text": "x", "progress": 120})
        assert response.status_code == 400

    def test_strangers_cannot_touch_goal(self, client_for, other_user, other_employee, goal):
        client = client_for(other_user)
        assert client.get(reverse("goal-detail", args=[goal.pk])).status_code == 403
        assert client.post(reverse("goal-updates", args=[goal.pk]),
                           {"update_text": "x", "progress": 10}).status_code == 403

    def test_owner_cannot_reassign(self, client_for, employee_user, employee, other_employee,
                                   goal):
        response = client_for(employee_user).patch(
            reverse("goal-detail", args=[goal.pk]),
            {"employee": other_employee.pk, "priority": "HIGH"}, format="json")
        assert response.status_code == 200
        assert response.data["employee"] == employee.pk
        assert response.data["priority"] == "HIGH"

    def test_list_is_scoped(self, client_for, employee_user, goal, other_employee):
        PerformanceGoal.objects.create(
            employee=other_employee, title="Theirs",
            start_date=date(2024, 1, 1), end_date=date(2024, 2, 1))
        response = client_for(employee_user).get(reverse("goals"))
        assert [g["id"] for g in response.data["results"]] == [goal.pk]


@pytest.mark.django_db
class TestReviews:

    def payload(self, employee, cycle, **extra):
        data = {"employee": employee.pk, "cycle": cycle.pk, "review_type": "MID_YEAR"}
        data.update(extra)
        return data

    def test_manager_reviews(self, client_for, manager_user, employee, cycle, goal):
        client = client_for(manager_user)
        response = client.post(reverse("reviews"), self.payload(
            employee, cycle, goal=goal.pk), format="json")
        assert response.status_code == 201
        assert response.data["reviewed_by"] == manager_user.pk

        url = reverse("review-detail", args=[response.data["id"]])
        done = client.patch(url, {"status": "COMPLETED",
                                  "rating": "MEETS_EXPECTATIONS"}, format="json")
        assert done.status_code == 200
        assert done.data["reviewed_at"] is not None

    def test_inactive_cycle(self, client_for, manager_user, employee, cycle):
        cycle.status = ReviewCycle.STATUS_COMPLETED
        cycle.save()
        response = client_for(manager_user).post(
            reverse("reviews"), self.payload(employee, cycle), format="json")
        assert response.status_code == 400
        assert "cycle" in response.data

    def test_goal_of_another_employee(self, client_for, manager_user, other_employee,
                                      cycle, goal):
        response = client_for(manager_user).post(reverse("reviews"), self.payload(
            other_employee, cycle, goal=goal.pk), format="json")
        assert response.status_code == 400
        assert "goal" in response.data

    def test_employee_cannot_review(self, client_for, employee_user, employee, cycle):
        response = client_for(employee_user).post(
            reverse("reviews"), self.payload(employee, cycle), format="json")
        assert response.status_code == 403

    def test_visibility(self, client_for, employee_user, other_user, other_employee,
                        manager_user, make_user, employee, cycle):
        review = PerformanceReview.objects.create(
            employee=employee, cycle=cycle, review_type="MID_YEAR", reviewed_by=manager_user)
        url = reverse("review-detail", args=[review.pk])
        other_manager = make_user("m2", role="manager")

        assert client_for(employee_user).get(url).status_code == 200
        assert client_for(other_user).get(url).status_code == 403
        assert client_for(other_manager).get(url).status_code == 403
        assert client_for(other_manager).patch(
            url, {"comments": "x"}, format="json").status_code == 403
        assert client_for(manager_user).delete(url).status_code == 403

    def test_filter_by_cycle(self, client_for, manager_user, employee, cycle):
        PerformanceReview.objects.create(employee=employee, cycle=cycle, review_type="MID_YEAR")
        client = client_for(manager_user)
        assert client.get(reverse("reviews"), {"cycle": cycle.pk}).data["count"] == 1
        bad = client.get(reverse("reviews"), {"cycle": "latest"})
        assert bad.status_code == 400
        assert "cycle" in bad.data["detail"]

    def test_bad_goal_employee_filter(self, client_for, manager_user):
        assert client_for(manager_user).get(
            reverse("goals"), {"employee": "me"}).status_code == 400

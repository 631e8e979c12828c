from io import StringIO

import pytest
from django.core.management import call_command
from django.db.migrations.loader import MigrationLoader

LOCAL_APPS = ["accounts", "employees", "attendance", "leave", "payroll",
              "onboarding", "performance", "support"]


@pytest.mark.django_db
class TestMigrations:

    def test_models_match_migrations(self):
        out = StringIO()
        call_command("makemigrations", "--check", "--dry-run", stdout=out)
        assert "No changes detected" in out.getvalue()

    def test_every_app_has_an_initial_migration(self):
        loader = MigrationLoader(None, ignore_no_migrations=True)
        for app in LOCAL_APPS:
            assert (app, "0001_initial") in loader.disk_migrations
        assert loader.migrated_apps >= set(LOCAL_APPS)

    def test_token_blacklist_resolves_against_custom_user(self):
        loader = MigrationLoader(None, ignore_no_migrations=True)
        plan = loader.graph.forwards_plan(("token_blacklist", "0001_initial"))
        assert ("accounts", "0001_initial") in plan

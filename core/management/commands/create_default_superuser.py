import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Create the admin superuser when no user exists yet"

    def handle(self, *args, **options):
        User = get_user_model()
        if User.objects.exists():
            self.stdout.write(self.style.SUCCESS(
                'Superuser already exists, change its password with "python manage.py changepassword admin".'))
            return

        password = os.getenv("ADMIN_PASSWORD", "feedtranslator")
        User.objects.create_superuser("admin", "admin@example.com", password)
        self.stdout.write(self.style.SUCCESS("Successfully created a new superuser: admin"))

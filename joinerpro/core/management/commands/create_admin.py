"""
Management command to create an administrator account
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = "Creates an active administrator user: create_admin <username> <password>"

    def add_arguments(self, parser):
        parser.add_argument('username', type=str)
        parser.add_argument('password', type=str)
        parser.add_argument(
            '--email',
            type=str,
            default='',
            help='Optional e-mail address for the new user',
        )

    def handle(self, *args, **options):
        username = options['username'].strip()
        password = options['password']

        if not username or not password:
            raise CommandError('Usage: manage.py create_admin <username> <password>')

        if User.objects.filter(username=username).exists():
            raise CommandError(f"User '{username}' already exists.")

        user = User.objects.create_user(
            username=username,
            password=password,
            email=options['email'],
            role='admin',
            is_staff=True,
            is_active=True,
        )

        self.stdout.write(self.style.SUCCESS("Administrator created successfully!"))
        self.stdout.write(f"Username: {user.username}")
        self.stdout.write(f"Role: {user.role}")

#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Mini SaaS Dashboard - project tracking backend
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Shortcuts for local setup
    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command == 'setup':
            print("🚀 Setting up Mini SaaS Dashboard...")

            print("📊 Applying migrations...")
            if os.system(f'{sys.executable} manage.py migrate') != 0:
                print("❌ Migrations failed")
                return

            print("📁 Collecting static files...")
            os.system(f'{sys.executable} manage.py collectstatic --noinput')

            print("🌱 Loading demo data...")
            os.system(f'{sys.executable} manage.py seed_demo')

            print("✅ Setup done!")
            return

        elif command == 'backup':
            print("💾 Dumping database...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_dashboard_{timestamp}.json"
            os.system(f'{sys.executable} manage.py dumpdata core --indent 2 > {backup_file}')
            print(f"✅ Backup written: {backup_file}")
            return

        elif command == 'reset':
            confirm = input("⚠️  This deletes ALL data. Continue? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetting database...")
                os.system(f'{sys.executable} manage.py flush --noinput')
                os.system(f'{sys.executable} manage.py migrate')
                os.system(f'{sys.executable} manage.py seed_demo')
                print("✅ Reset done!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()

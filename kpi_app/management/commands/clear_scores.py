from django.core.management.base import BaseCommand
from django.db import transaction
from kpi_app.models import EvaluationItem, EvaluationComment


class Command(BaseCommand):
    help = "Delete every recorded item score and group comment (evaluations are kept)."

    def add_arguments(self, parser):
        parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt.")

    def handle(self, *args, **options):
        if not options["yes"]:
            answer = input("This deletes all KPI scores and comments. Continue? [y/N] ")
            if answer.strip().lower() != "y":
                self.stdout.write(self.style.WARNING("Aborted."))
                return

        with transaction.atomic():
            items, _ = EvaluationItem.objects.all().delete()
            comments, _ = EvaluationComment.objects.all().delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {items} scores and {comments} comments."))

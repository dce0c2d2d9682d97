from django.core.management.base import BaseCommand

from core.models import Source
from core.queues import enqueue_ingest_source
from core.repository import list_active_sources


class Command(BaseCommand):
    help = "Queue ingestion of every active RSS source"

    def handle(self, *args, **options):
        sources = list_active_sources(Source.Type.RSS)
        for source in sources:
            enqueue_ingest_source(source.id)
        self.stdout.write(self.style.SUCCESS(f"Queued ingestion of {len(sources)} sources"))

import logging

from django.core.management.base import BaseCommand

from core.models import Source
from core.queues import enqueue_ingest_source

DEFAULT_SOURCES = [
    {"name": "סרוגים", "display_name": "Srugim", "alignment": "Religious Zionist",
     "url": "https://www.srugim.co.il/feed"},
    {"name": "ישראל היום", "display_name": "Israel Hayom",
     "alignment": "Right-wing populist, pro-Likud, nationalist",
     "url": "https://www.israelhayom.co.il/rss.xml"},
    {"name": "JDN", "display_name": "JDN News", "alignment": "Haredi",
     "url": "https://www.jdn.co.il/feed/"},
    {"name": "ערוץ 7 – ביטחון", "display_name": "Arutz Sheva – Security",
     "alignment": "Religious Zionist / Far-right", "url": "https://www.inn.co.il/Rss.aspx?i=2"},
    {"name": "מקור ראשון – ביטחון", "display_name": "Makor Rishon – Security",
     "alignment": "Religious Zionist / Right-wing",
     "url": "https://www.makorrishon.co.il/category/security/feed/"},
    {"name": "חדשות JDN – ביטחון", "display_name": "JDN News – Security", "alignment": "Haredi",
     "url": "https://archive.jdn.co.il/category/security/feed/"},
]


class Command(BaseCommand):
    help = "Create the default RSS sources if missing and queue their ingestion"

    def add_arguments(self, parser):
        parser.add_argument(
            "--no-ingest",
            action="store_true",
            help="Only create the sources, do not queue ingestion",
        )

    def handle(self, *args, **options):
        source_ids = []
        for data in DEFAULT_SOURCES:
            source, created = Source.objects.get_or_create(
                type=Source.Type.RSS,
                name=data["name"],
                defaults={
                    "display_name": data["display_name"],
                    "alignment": data["alignment"],
                    "url": data["url"],
                    "language": data.get("language", "he"),
                    "active": True,
                },
            )
            if created:
                logging.info("Created source %s", source)
            source_ids.append(source.id)

        if not options["no_ingest"]:
            for source_id in source_ids:
                enqueue_ingest_source(source_id)

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(source_ids)} RSS sources"))

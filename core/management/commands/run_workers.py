import subprocess
import sys

from django.conf import settings
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    """
    Start the Celery processes the pipeline needs: one ingestion worker,
    one translation worker and the beat scheduler. Stops them all when
    interrupted.
    """

    help = "Run the ingestion and translation workers and the beat scheduler."

    def add_arguments(self, parser):
        parser.add_argument("--no-beat", action="store_true", help="Do not start the beat scheduler")
        parser.add_argument("--loglevel", default=settings.LOG_LEVEL.lower())

    def commands(self, options) -> list[list[str]]:
        celery = [sys.executable, "-m", "celery", "-A", "config"]
        loglevel = f"--loglevel={options['loglevel']}"
        commands = [
            celery + ["worker", "-Q", "ingest", "-c", "1", "-n", "ingest@%h", loglevel],
            celery + [
                "worker",
                "-Q",
                "translation",
                "-c",
                str(settings.TRANSLATION_CONCURRENCY),
                "-n",
                "translation@%h",
                loglevel,
            ],
        ]
        if not options["no_beat"]:
            commands.append(celery + ["beat", loglevel])
        return commands

    def handle(self, *args, **options):
        processes = [subprocess.Popen(command) for command in self.commands(options)]
        try:
            for process in processes:
                process.wait()
        except KeyboardInterrupt:
            pass
        finally:
            for process in processes:
                if process.poll() is None:
                    process.terminate()
                    process.wait()

from .source import Source
from .content_item import ContentItem
from .failed_job import FailedJob

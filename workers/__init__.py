from . import stack
from . import enumerator
from . import deleter
from . import pipeline

from .stack import ObjectStack
from .enumerator import Enumerator, queue_object_versions
from .deleter import DeletionWorker, delete_from_queue
from .pipeline import Pipeline, nuke_bucket

from . import s3

from .s3 import S3Backend, S3Service

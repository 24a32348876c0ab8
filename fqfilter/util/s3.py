import os
import time
import random
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

import fqfilter.util.log as log
from fqfilter.exceptions import ResourceError

MAX_TRIES = 3
RETRY_DELAY_SECONDS = 2


def is_s3_path(path):
    return bool(path) and path.startswith("s3://")


def split_s3_path(s3_path):
    ''' s3://bucket/some/key -> ("bucket", "some/key") '''
    url = urlparse(s3_path)
    if url.scheme != "s3" or not url.netloc or not url.path.lstrip("/"):
        raise ValueError("Not an s3 object path: %s" % s3_path)
    return url.netloc, url.path.lstrip("/")


def s3_client():
    session = boto3.session.Session()
    return session.client("s3")


def _with_retries(description, fn, max_tries=MAX_TRIES):
    for attempt in range(1, max_tries + 1):
        try:
            return fn()
        except (BotoCoreError, ClientError) as e:
            if attempt == max_tries:
                raise
            delay = RETRY_DELAY_SECONDS * attempt + random.random()
            log.write("%s failed (attempt %d of %d): %s. Retrying in %.1f seconds." %
                      (description, attempt, max_tries, e, delay), warning=True)
            time.sleep(delay)


def fetch_from_s3(src, dst_dir, client=None):
    """Download the s3 object src into dst_dir and return the local path."""
    bucket, key = split_s3_path(src)
    dst = os.path.join(dst_dir, os.path.basename(key))
    client = client or s3_client()
    start = log.log_event("s3_fetch_started", {"src": src, "dst": dst})
    try:
        _with_retries("fetch %s" % src, lambda: client.download_file(bucket, key, dst))
    except (BotoCoreError, ClientError) as e:
        raise ResourceError(src, e, action="fetch") from e
    log.log_event("s3_fetch_completed", {"src": src, "dst": dst}, start_time=start)
    return dst


def upload_with_retries(from_f, to_f, client=None):
    bucket, key = split_s3_path(to_f)
    client = client or s3_client()
    start = log.log_event("s3_upload_started", {"src": from_f, "dst": to_f})
    try:
        _with_retries("upload %s" % to_f, lambda: client.upload_file(from_f, bucket, key))
    except (BotoCoreError, ClientError) as e:
        raise ResourceError(to_f, e, action="upload") from e
    log.log_event("s3_upload_completed", {"src": from_f, "dst": to_f}, start_time=start)

"""
Configuration constants for the JPEG sidecar extractor.
"""
import re

# --- Container Signature ---
# Start-of-image marker every JPEG begins with
JPEG_MAGIC = b'\xff\xd8'

# --- Embedded Metadata (exifread tag keys) ---
# exifread names tags "<IFD> <TagName>"; numeric ids kept for reference
ORIENTATION_TAG = 'Image Orientation'        # 0x0112
CAPTURE_TIME_TAG = 'EXIF DateTimeOriginal'   # 0x9003
CAMERA_MODEL_TAG = 'Image Model'             # 0x0110
CAMERA_SERIAL_TAG = 'EXIF BodySerialNumber'  # 0xA431

# EXIF format is always "YYYY:MM:DD HH:MM:SS", no timezone.
# strptime alone would also take unpadded fields, so match the shape first.
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
EXIF_DATE_PATTERN = re.compile(r"\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)

ORIENTATIONS = {
    1: 'Horizontal (normal)',
    2: 'Mirrored horizontal',
    3: 'Rotated 180',
    4: 'Mirrored vertical',
    5: 'Mirrored horizontal then rotated 90 CCW',
    6: 'Rotated 90 CW',
    7: 'Mirrored horizontal then rotated 90 CW',
    8: 'Rotated 90 CCW',
}

# --- Filesystem ---
# Most Linux filesystems don't expose birth time through os.stat.
# When True, the inode change time stands in for it.
CREATED_TIME_FALLBACK_TO_CTIME = True

# --- Output ---
SIDECAR_SUFFIX = ".json"

# --- Performance ---
# 1 = sequential. Extraction is I/O bound so threads are enough.
DEFAULT_MAX_WORKERS = 1

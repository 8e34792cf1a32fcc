# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions

The tag tables are closed: only the tags listed here are decoded, every
other tag found in an IFD is dropped.

Copyright 2025 DNAi inc.
"""

# ============================================================
# IFD0 (Image) Tags
# ============================================================
TAG_IMAGE_DESCRIPTION = 0x010E
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_ORIENTATION = 0x0112
TAG_X_RESOLUTION = 0x011A
TAG_Y_RESOLUTION = 0x011B
TAG_RESOLUTION_UNIT = 0x0128
TAG_SOFTWARE = 0x0131
TAG_DATETIME = 0x0132
TAG_ARTIST = 0x013B
TAG_COPYRIGHT = 0x8298

# Sub-IFD pointers
TAG_EXIF_IFD_POINTER = 0x8769
TAG_GPS_INFO_IFD_POINTER = 0x8825

# ============================================================
# EXIF Sub-IFD Tags
# ============================================================
TAG_EXPOSURE_TIME = 0x829A
TAG_F_NUMBER = 0x829D
TAG_ISO_SPEED_RATINGS = 0x8827
TAG_DATETIME_ORIGINAL = 0x9003
TAG_DATETIME_DIGITIZED = 0x9004
TAG_FLASH = 0x9209
TAG_FOCAL_LENGTH = 0x920A
TAG_USER_COMMENT = 0x9286
TAG_WHITE_BALANCE = 0xA403
TAG_IMAGE_UNIQUE_ID = 0xA420
TAG_CAMERA_OWNER_NAME = 0xA430
TAG_BODY_SERIAL_NUMBER = 0xA431
TAG_LENS_MAKE = 0xA433
TAG_LENS_MODEL = 0xA434
TAG_LENS_SERIAL_NUMBER = 0xA435

# ============================================================
# GPS Sub-IFD Tags
# ============================================================
TAG_GPS_VERSION_ID = 0x0000
TAG_GPS_LATITUDE_REF = 0x0001
TAG_GPS_LATITUDE = 0x0002
TAG_GPS_LONGITUDE_REF = 0x0003
TAG_GPS_LONGITUDE = 0x0004
TAG_GPS_ALTITUDE_REF = 0x0005
TAG_GPS_ALTITUDE = 0x0006
TAG_GPS_TIMESTAMP = 0x0007
TAG_GPS_DATESTAMP = 0x001D


EXIF_TAG_NAMES = {
    TAG_IMAGE_DESCRIPTION: "ImageDescription",
    TAG_MAKE: "Make",
    TAG_MODEL: "Model",
    TAG_ORIENTATION: "Orientation",
    TAG_SOFTWARE: "Software",
    TAG_DATETIME: "DateTime",
    TAG_ARTIST: "Artist",
    TAG_COPYRIGHT: "Copyright",
    TAG_EXPOSURE_TIME: "ExposureTime",
    TAG_F_NUMBER: "FNumber",
    TAG_ISO_SPEED_RATINGS: "ISO",
    TAG_DATETIME_ORIGINAL: "DateTimeOriginal",
    TAG_DATETIME_DIGITIZED: "DateTimeDigitized",
    TAG_FOCAL_LENGTH: "FocalLength",
    TAG_FLASH: "Flash",
    TAG_USER_COMMENT: "UserComment",
    TAG_IMAGE_UNIQUE_ID: "ImageUniqueID",
    TAG_WHITE_BALANCE: "WhiteBalance",
    TAG_CAMERA_OWNER_NAME: "CameraOwnerName",
    TAG_BODY_SERIAL_NUMBER: "BodySerialNumber",
    TAG_LENS_MAKE: "LensMake",
    TAG_LENS_MODEL: "LensModel",
    TAG_LENS_SERIAL_NUMBER: "LensSerialNumber",
}

GPS_TAG_NAMES = {
    TAG_GPS_VERSION_ID: "GPSVersionID",
    TAG_GPS_LATITUDE_REF: "GPSLatitudeRef",
    TAG_GPS_LATITUDE: "GPSLatitude",
    TAG_GPS_LONGITUDE_REF: "GPSLongitudeRef",
    TAG_GPS_LONGITUDE: "GPSLongitude",
    TAG_GPS_ALTITUDE_REF: "GPSAltitudeRef",
    TAG_GPS_ALTITUDE: "GPSAltitude",
    TAG_GPS_TIMESTAMP: "GPSTimeStamp",
    TAG_GPS_DATESTAMP: "GPSDateStamp",
}


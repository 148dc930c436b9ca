"""Image fetching for SPINWHEEL."""

from spinwheel.fetch.base import ImageFetcher, ImageHandle, StaticImageFetcher, decode_image
from spinwheel.fetch.http import HttpImageFetcher

__all__ = [
    "ImageFetcher",
    "ImageHandle",
    "StaticImageFetcher",
    "decode_image",
    "HttpImageFetcher",
]

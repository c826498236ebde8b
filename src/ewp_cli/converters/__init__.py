"""
Project document conversion modules.
"""

from .ewp_to_model import EwpToModelConverter, decode
from .model_to_ewp import ModelToEwpConverter, encode
from .xml_bridge import RawFragments, XMLBridge

__all__ = [
    "EwpToModelConverter",
    "ModelToEwpConverter",
    "RawFragments",
    "XMLBridge",
    "decode",
    "encode",
]

from xorspace.dht import BinaryNodeID, BitIndices, NodeID
from xorspace.utils import *

__version__ = "0.1.0"

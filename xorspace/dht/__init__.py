from xorspace.dht.bits import BitIndices
from xorspace.dht.identifier import BinaryNodeID, NodeID

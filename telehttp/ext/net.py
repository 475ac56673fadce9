"""
Standard network attributes.
"""

# request targets
PEER_NAME = "net.peer.name"

PEER_SERVICE = "peer.service"

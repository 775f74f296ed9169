# Message type constants (stringly-typed protocol; canonical list lives here)

# relay -> client, first frame on every connection
T_SYNC = "sync"

# client -> relay (and fanned out to the other clients)
T_DEPLOY = "deploy"
T_UPDATE = "update"

WAVE_TYPES = ("sine", "square", "sawtooth", "triangle")

# Preview colors. Never persisted; a block only carries them while being held or dragged.
VALID_COLOR = "rgb(145, 242, 138)"
INVALID_COLOR = "rgb(242, 138, 145)"

MIN_BLOCK_LENGTH = 25.0

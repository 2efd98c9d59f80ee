# =============================================================================
# BOARD / HAND - shared by the shop phase and the battle engine
# =============================================================================
BOARD_SIZE = 5  # slots per side, index 0 is the front
HAND_SIZE = 7  # cards drawn per round

# =============================================================================
# GAME PROGRESSION
# =============================================================================
STARTING_LIVES = 3
WINS_TO_VICTORY = 10
STARTING_MANA_LIMIT = 3
MAX_MANA_LIMIT = 10

# =============================================================================
# EXECUTION LIMITS - must be identical on every host
# =============================================================================
MAX_RECURSION_DEPTH = 50  # nested ability applications
MAX_SPAWNS_PER_BATTLE = 100
MAX_TRIGGERS_PER_PHASE = 200
MAX_TRIGGER_DEPTH = 10  # nested reaction queues (hurt -> faint -> spawn -> ...)
MAX_BATTLE_ROUNDS = 100  # clash iterations

# =============================================================================
# INTEGER RANGES
# =============================================================================
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
U32_MAX = 0xFFFFFFFF
U64_MASK = 0xFFFFFFFFFFFFFFFF

# Enemy unit ids carry the top bit
ENEMY_ID_FLAG = 0x80000000

# =============================================================================
# SHOP RNG DERIVATION
# =============================================================================
SHOP_ROUND_MULTIPLIER = 0x9E3779B97F4A7C15  # golden-ratio constant
SHOP_START_SALT = 0x53484F5000000001  # "SHOP" + 1
SHOP_BUY_SALT = 0x53484F5000000002
SHOP_SELL_SALT = 0x53484F5000000003

# =============================================================================
# BOUNDED ENCODING - storage ceilings for metered hosts
# =============================================================================
MAX_NAME_LENGTH = 32
MAX_BOUNDED_EVENTS = 2048
MAX_BOUNDED_COLLECTION = 64

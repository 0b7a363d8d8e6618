"""Protocol constants for the SAMM quote engine.

Centralizes fixed-point scales and the fee-curve constants of the
deployed fee function.
"""

# Fixed-point scale of SAMM parameters (beta1, rmin, rmax, c): 1e6 == 1.0
C_SCALE = 1_000_000

# Default SAMM parameters, scaled by C_SCALE
DEFAULT_BETA1 = -1_050_000  # -1.05
DEFAULT_RMIN = 1_000  # 0.001
DEFAULT_RMAX = 12_000  # 0.012
DEFAULT_C = 10_400  # 0.0104

# Dynamic trade fee: ceiling is MAX_FEE_MULTIPLIER times the base rate and the
# adaptive slope is ADAPTIVE_SLOPE_NUMERATOR / ADAPTIVE_SLOPE_DENOMINATOR (1.2)
MAX_FEE_MULTIPLIER = 5
ADAPTIVE_SLOPE_NUMERATOR = 12
ADAPTIVE_SLOPE_DENOMINATOR = 10

# Default trade fee 0.25%, owner fee disabled
DEFAULT_TRADE_FEE_NUMERATOR = 25
DEFAULT_TRADE_FEE_DENOMINATOR = 10_000
DEFAULT_OWNER_FEE_NUMERATOR = 0
DEFAULT_OWNER_FEE_DENOMINATOR = 1

# Basis points denominator for fee-rate reporting
BPS = 10_000

# Multi-hop fee totals are reported in this many decimals
NORMALIZED_DECIMALS = 18

# Settlement entry point of a SAMM pool
SWAP_SAMM_SIGNATURE = "swapSAMM(uint256,uint256,address,address,address)"

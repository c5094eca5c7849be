"""Protocol constants for the two-asset exchange.

Centralizes integer widths, the pricing fee, and well-known addresses.
Every other module imports its widths from here.
"""

# Integer widths of the persisted pool record
UINT32_MODULUS = 2**32
UINT112_MAX = 2**112 - 1
UINT256_MODULUS = 2**256
UINT256_MAX = UINT256_MODULUS - 1

# UQ112x112 scale factor (112 fractional bits)
Q112 = 2**112

# 0.3% fee: 997 of every 1000 input units are priced
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Shares minted to the zero address on the first deposit.
# 0 keeps the first depositor's shares equal to sqrt(amount0 * amount1).
MINIMUM_LOCKED_LIQUIDITY = 0

# Mint source / burn destination for share transfers
ZERO_ADDRESS = "0x" + "00" * 20

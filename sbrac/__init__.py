"""
Sealed-Bid Reverse Auction with Clearing price (SBRAC)

A privacy-preserving reverse auction:
- Participants publish only group elements derived from random secrets
- A bit-by-bit secure-minimum protocol reveals the clearing price
- Non-interactive OR-proofs show each published bit value is well formed
- Pedersen commitments let the winner prove the clearing price was theirs
"""

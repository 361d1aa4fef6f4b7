"""Win rate and Wilson score lower bound."""

import math

Z_95 = 1.96


def win_rate(wins: int, total: int) -> float:
    return wins / total if total > 0 else 0.0


def wilson_lower_bound(wins: int, total: int, z: float = Z_95) -> float:
    """Lower bound of the Wilson score interval for wins/total.

    Small samples are pulled well below their raw rate:
    8/10 scores about 0.49 while 80/100 scores about 0.71.
    """
    if total <= 0:
        return 0.0
    phat = wins / total
    z2 = z * z
    center = phat + z2 / (2 * total)
    spread = z * math.sqrt((phat * (1 - phat) + z2 / (4 * total)) / total)
    score = (center - spread) / (1 + z2 / total)
    return min(max(score, 0.0), phat)

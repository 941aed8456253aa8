"""
Sampling Planner Module

Computes a power-of-two decode downsample factor from source and target
dimensions. Pure arithmetic, no pixel access.
"""


class SamplingPlanner:
    """Chooses how aggressively to subsample an image while decoding."""

    @staticmethod
    def plan(
        sourceWidth: int,
        sourceHeight: int,
        targetWidth: int,
        targetHeight: int
    ) -> int:
        """
        Compute the downsample factor.

        Returns 1 if the source already fits the target. Otherwise the factor
        doubles while both original dimensions divided by it still exceed the
        target. Each step divides the original dimensions, never a reduced value.

        Args:
            sourceWidth: Source image width.
            sourceHeight: Source image height.
            targetWidth: Requested width.
            targetHeight: Requested height.

        Returns:
            int: Power of two >= 1.
        """
        if sourceWidth <= targetWidth and sourceHeight <= targetHeight:
            return 1

        targetWidth = max(1, targetWidth)
        targetHeight = max(1, targetHeight)

        factor = 1
        while (
            sourceWidth // factor > targetWidth
            and sourceHeight // factor > targetHeight
        ):
            factor *= 2
        return factor

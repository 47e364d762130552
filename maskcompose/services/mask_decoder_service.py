# services/mask_decoder_service.py
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

import numpy as np

from ..errors import MaskDecodeError
from ..models.composite_result import DecodeFailure
from ..models.mask import Mask
from ..repositories.mask_repository import MaskRepository

logger = logging.getLogger(__name__)


class MaskDecoderService:
    """
    Turns encoded masks into intensity buffers aligned with the base image.

    • All masks of one call decode concurrently, one worker per mask.
    • A malformed mask is reported as a DecodeFailure and skipped.
    """

    def __init__(self, repo: MaskRepository | None = None) -> None:
        self.repo = repo or MaskRepository()

    def decode(self, mask: Mask, target_width: int, target_height: int) -> np.ndarray:
        return self.repo.retrieve_intensity(mask, target_width, target_height)

    def decode_all(
        self,
        masks: Sequence[Mask],
        target_width: int,
        target_height: int,
    ) -> Tuple[List[Tuple[int, np.ndarray]], List[DecodeFailure]]:
        """
        Returns
        -------
        decoded  : [(index, intensity)] in input order, failures removed
        failures : [DecodeFailure] in input order
        """
        if not masks:
            return [], []

        decoded: List[Tuple[int, np.ndarray]] = []
        failures: List[DecodeFailure] = []

        with ThreadPoolExecutor(max_workers=len(masks)) as pool:
            futures = [
                pool.submit(self.decode, mask, target_width, target_height)
                for mask in masks
            ]
            # join: every future settles before anything is returned
            for index, future in enumerate(futures):
                try:
                    decoded.append((index, future.result()))
                except MaskDecodeError as err:
                    logger.warning(f"Skipping mask {index}: {err}")
                    failures.append(DecodeFailure(index=index, reason=str(err)))

        logger.debug(f"Decoded {len(decoded)}/{len(masks)} masks at {target_width}x{target_height}")
        return decoded, failures

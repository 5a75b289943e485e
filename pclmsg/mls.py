"""Settings of moving least squares surface smoothing and their reconfiguration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MLSConfig:
    """A requested set of moving least squares parameters."""

    search_radius: float = 0.0
    spatial_locator: int = 0
    use_polynomial_fit: bool = False
    polynomial_order: int = 2
    gaussian_parameter: float = 0.0


@dataclass
class MovingLeastSquaresSettings:
    """Current parameters, together with the values the smoother works with.

    effective_polynomial_order and sqr_gauss_param are what the smoothing
    itself uses; they follow the requested parameters as they change.
    """

    search_radius: float = 0.0
    spatial_locator: int = 0
    use_polynomial_fit: bool = False
    polynomial_order: int = 2
    gaussian_parameter: float = 0.0
    effective_polynomial_order: int = 2
    sqr_gauss_param: float = 0.0

    def apply_config(self, config: MLSConfig) -> list[str]:
        """Take over the parameters of config that differ; return their names in order."""
        changed: list[str] = []

        if self.search_radius != config.search_radius:
            self.search_radius = config.search_radius
            logger.debug("Setting the search radius: %f.", self.search_radius)
            changed.append("search_radius")

        if self.spatial_locator != config.spatial_locator:
            self.spatial_locator = config.spatial_locator
            logger.debug("Setting the spatial locator to type: %d.", self.spatial_locator)
            changed.append("spatial_locator")

        if self.use_polynomial_fit != config.use_polynomial_fit:
            self.use_polynomial_fit = config.use_polynomial_fit
            logger.debug("Setting the use_polynomial_fit flag to: %d.", self.use_polynomial_fit)
            if self.use_polynomial_fit:
                logger.warning("use_polynomial_fit is deprecated, use polynomial_order instead!")
                if self.effective_polynomial_order < 2:
                    self.effective_polynomial_order = 2
            else:
                self.effective_polynomial_order = 0
            changed.append("use_polynomial_fit")

        if self.polynomial_order != config.polynomial_order:
            self.polynomial_order = config.polynomial_order
            logger.debug("Setting the polynomial order to: %d.", self.polynomial_order)
            self.effective_polynomial_order = self.polynomial_order
            changed.append("polynomial_order")

        if self.gaussian_parameter != config.gaussian_parameter:
            self.gaussian_parameter = config.gaussian_parameter
            logger.debug("Setting the gaussian parameter to: %f.", self.gaussian_parameter)
            self.sqr_gauss_param = self.gaussian_parameter * self.gaussian_parameter
            changed.append("gaussian_parameter")

        return changed
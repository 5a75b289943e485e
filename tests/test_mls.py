import logging

from pclmsg.mls import MLSConfig, MovingLeastSquaresSettings


def test_default_config_changes_nothing():
    settings = MovingLeastSquaresSettings()
    assert settings.apply_config(MLSConfig()) == []


def test_search_radius_change_reported_once():
    settings = MovingLeastSquaresSettings()
    config = MLSConfig(search_radius=0.03)
    assert settings.apply_config(config) == ["search_radius"]
    assert settings.search_radius == config.search_radius
    assert settings.apply_config(config) == []


def test_changed_names_in_order():
    settings = MovingLeastSquaresSettings()
    config = MLSConfig(
        search_radius=0.1,
        spatial_locator=1,
        use_polynomial_fit=True,
        polynomial_order=3,
        gaussian_parameter=0.2,
    )
    assert settings.apply_config(config) == [
        "search_radius",
        "spatial_locator",
        "use_polynomial_fit",
        "polynomial_order",
        "gaussian_parameter",
    ]
    assert settings.spatial_locator == 1


def test_gaussian_parameter_squared():
    settings = MovingLeastSquaresSettings()
    settings.apply_config(MLSConfig(gaussian_parameter=0.5))
    assert settings.gaussian_parameter == 0.5
    assert settings.sqr_gauss_param == 0.25


def test_polynomial_fit_raises_low_order_to_two(caplog):
    settings = MovingLeastSquaresSettings(effective_polynomial_order=0)
    with caplog.at_level(logging.WARNING, logger="pclmsg.mls"):
        settings.apply_config(MLSConfig(use_polynomial_fit=True))
    assert settings.effective_polynomial_order == 2
    assert any("deprecated" in record.getMessage() for record in caplog.records)


def test_polynomial_fit_keeps_higher_order():
    settings = MovingLeastSquaresSettings(effective_polynomial_order=3)
    settings.apply_config(MLSConfig(use_polynomial_fit=True))
    assert settings.effective_polynomial_order == 3


def test_disabling_polynomial_fit_sets_order_zero():
    settings = MovingLeastSquaresSettings(use_polynomial_fit=True, effective_polynomial_order=2)
    settings.apply_config(MLSConfig(use_polynomial_fit=False))
    assert settings.use_polynomial_fit is False
    assert settings.effective_polynomial_order == 0


def test_polynomial_order_applied_after_fit_flag():
    settings = MovingLeastSquaresSettings(use_polynomial_fit=True)
    config = MLSConfig(use_polynomial_fit=False, polynomial_order=4)
    settings.apply_config(config)
    assert settings.effective_polynomial_order == config.polynomial_order
    assert settings.polynomial_order == config.polynomial_order


def test_unchanged_parameters_keep_derived_values():
    settings = MovingLeastSquaresSettings(gaussian_parameter=0.5, sqr_gauss_param=0.7)
    settings.apply_config(MLSConfig(gaussian_parameter=0.5))
    assert settings.sqr_gauss_param == 0.7
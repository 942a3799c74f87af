"""Default configuration parameters for quotewatch."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistryParams:
    """Symbol lifecycle parameters."""
    default_resolution: str = "D"                    # Backfilled on record creation
    subscribe_on_create: bool = True                 # Push-subscribe available records


@dataclass(frozen=True)
class BackfillParams:
    """Historical candle fetch parameters."""
    draw_amount: int = 30                            # Candles shown per chart
    backlog_amount: int = 200                        # Extra candles for indicator warm-up
    max_attempts: int = 10                           # Widening loop bound
    widen_factor: int = 5                            # Draw multiples added per attempt

    # Provider history is limited for coarse resolutions
    week_window_step: int = 30
    week_min_entries: int = 50
    month_window_step: int = 12
    month_min_entries: int = 12

    @property
    def required_amount(self) -> int:
        """Candle count that makes an intraday/day resolution populated."""
        return self.backlog_amount + self.draw_amount


@dataclass(frozen=True)
class IndicatorParams:
    """Indicator defaults."""
    sma_period: int = 20
    bollinger_period: int = 20
    bollinger_factor: float = 2.0


@dataclass(frozen=True)
class PresenterParams:
    """Alert presenter output parameters."""
    format: str = "json"                             # json, pretty
    include_timestamp: bool = True


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    registry: RegistryParams
    backfill: BackfillParams
    indicators: IndicatorParams
    presenter: PresenterParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        registry=RegistryParams(),
        backfill=BackfillParams(),
        indicators=IndicatorParams(),
        presenter=PresenterParams(),
        logging=LoggingParams(),
    )

# telegraph/errors.py


class TelegraphError(Exception):
    """Base di tutti gli errori del pacchetto."""


class ConfigurationError(TelegraphError, ValueError):
    """Parametri di configurazione inutilizzabili (es. WPM <= 0)."""

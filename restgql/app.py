from .applications import create_app
from .config import Settings
from .logging import configure_logging

# Fresh settings so values exported by ``restgql serve`` are picked up.
settings = Settings()

configure_logging(debug=settings.debug, log_level=settings.log_level)

app = create_app(settings)

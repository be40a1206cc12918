"""Client application factory - wires clients, controllers and the notification poller"""

from dataclasses import dataclass
import httpx

from circulation_desk.config import get_api_url, settings
from circulation_desk.controllers.documents import DocumentLibraryController
from circulation_desk.controllers.loans import LoanLifecycleController
from circulation_desk.controllers.notifications import NotificationPoller
from circulation_desk.infrastructure.auth.session import SessionProvider
from circulation_desk.infrastructure.clients.catalog import CatalogClient
from circulation_desk.infrastructure.clients.documents import DocumentClient
from circulation_desk.infrastructure.observability.logging import setup_logging


@dataclass
class CirculationDesk:
    """One signed-in user's views over the catalog"""

    catalog: CatalogClient
    loans: LoanLifecycleController
    notifications: NotificationPoller
    documents: DocumentLibraryController

    async def open(self) -> None:
        """Mount: start polling and load the first page of loans"""
        self.notifications.start()
        await self.loans.fetch_my_loans()

    def close(self) -> None:
        """Unmount: stop polling and detach late completions from view state"""
        self.notifications.stop()
        self.loans.close()
        self.documents.close()


def create_desk(
    session: SessionProvider,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    configure_logging: bool = True,
) -> CirculationDesk:
    """Create and configure the client application"""
    if configure_logging:
        setup_logging(settings.log_level)

    base_url = base_url or get_api_url(settings)
    catalog = CatalogClient(session, base_url=base_url, transport=transport)
    documents = DocumentClient(session, base_url=base_url, transport=transport)

    return CirculationDesk(
        catalog=catalog,
        loans=LoanLifecycleController(catalog),
        notifications=NotificationPoller(catalog, session),
        documents=DocumentLibraryController(documents),
    )

"""
Client registry domain service - Client validation and creation.

Email and PESEL are not checked for uniqueness; two clients may
share either value.
"""

import logging
from dataclasses import dataclass

from .exceptions import ValidationError
from .models import NewClient
from .ports import ClientRepository

logger = logging.getLogger(__name__)


@dataclass
class ClientRegistry:
    """Validates client data and persists new clients."""

    repository: ClientRepository

    def create_client(
        self,
        first_name: str | None,
        last_name: str | None,
        email: str | None,
        pesel: str | None,
        telephone: str | None = None,
    ) -> int:
        """
        Create a new client.

        Required fields are trimmed before storage. A blank telephone
        is stored as absent.

        Args:
            first_name: Client first name
            last_name: Client last name
            email: Contact email
            pesel: National id number
            telephone: Optional phone number

        Returns:
            New client id

        Raises:
            ValidationError: If a required field is missing or blank
        """
        required = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "pesel": pesel,
        }
        missing = [name for name, value in required.items() if not (value or "").strip()]
        if missing:
            raise ValidationError(missing)

        client = NewClient(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            pesel=pesel.strip(),
            telephone=(telephone or "").strip() or None,
        )
        client_id = self.repository.add_client(client)
        logger.info("Created client %s", client_id)
        return client_id

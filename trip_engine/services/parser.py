"""
Freeform Trip Parser - Turns a free-text trip request into structured parameters.
"""
import logging
from typing import Optional, Union
from datetime import date

from .content_gateway import ContentGateway, Valid, get_content_gateway
from .extraction import parse_with_regex
from ..models.content import ContentKind, ParsedTrip, ParseContext
from ..models.trip import ValidationFailure

logger = logging.getLogger(__name__)


class FreeformTripParser:
    """
    Parses trip requests with AI when a credential is configured and with
    regex/gazetteer rules otherwise.
    """

    def __init__(self, gateway: Optional[ContentGateway] = None):
        self.gateway = gateway or get_content_gateway()

    def _gazetteer(self) -> Optional[list[str]]:
        places = [p for p in self.gateway.lookups.entries("gazetteer") if isinstance(p, str)]
        return places or None

    async def parse(
        self,
        text: str,
        has_ai_credential: bool,
        today: Optional[date] = None
    ) -> Union[ParsedTrip, ValidationFailure]:
        """
        Parse a free-text trip request.

        Args:
            text: The user's description, e.g. "7 day Singapore trip, budget 1.5 lakhs"
            has_ai_credential: Whether the AI path may be tried
            today: Reference date for relative dates (defaults to today)

        Returns:
            ParsedTrip, or ValidationFailure("destination_required") when no
            destination can be found by either path
        """
        today = today or date.today()

        if has_ai_credential:
            context = ParseContext(text=text or "", today=today)
            result = await self.gateway.request_ai(ContentKind.PARSED_TRIP, context)
            if isinstance(result, Valid):
                logger.info("Parsed trip request with AI")
                return result.payload
            # No retry: one AI attempt, then rules
            logger.warning(f"AI parse unusable, using rule-based parser: {result.reason}")

        return parse_with_regex(text or "", today=today, gazetteer=self._gazetteer())


# Global parser instance
parser: Optional[FreeformTripParser] = None


def get_parser() -> FreeformTripParser:
    """Get or create the global parser."""
    global parser
    if parser is None:
        parser = FreeformTripParser()
    return parser


async def parse_freeform(
    text: str,
    has_ai_credential: bool,
    today: Optional[date] = None
) -> Union[ParsedTrip, ValidationFailure]:
    """Parse a free-text trip request with the global parser."""
    return await get_parser().parse(text, has_ai_credential, today=today)

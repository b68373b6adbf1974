"""Cache rating enrichment from GCVote."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel

from gcweb.api.client import truncate
from gcweb.api.transport import RequestBody, Transport
from gcweb.config import Config
from gcweb.core.constants import APP_IDENTIFIER
from gcweb.exceptions import APIError
from gcweb.models.cache import NormalizedCacheRecord

logger = logging.getLogger(__name__)


class CacheRating(BaseModel):
    """GCVote rating for one cache."""

    geocode: str
    rating: float
    votes: int
    my_vote: float | None = None


class RatingsProvider(Protocol):
    """Looks up ratings for a batch of caches and stores them on the records."""

    def load_ratings(self, records: Sequence[NormalizedCacheRecord]) -> None: ...


def parse_votes(xml_text: str) -> dict[str, CacheRating]:
    """Parse a GCVote ``getVotes.php`` reply into ratings keyed by geocode.

    Example reply::

        <votes userName='x' currentVersion='2.4e' securityState='locked' loggedIn='true'>
          <vote userName='x' cacheId='...' voteMedian='4' voteAvg='3.8' voteCnt='12'
                voteUser='4.5' waypoint='GC1234' vote1='0' ... />
        </votes>
    """
    root = ET.fromstring(xml_text)
    ratings: dict[str, CacheRating] = {}
    for vote in root.iter("vote"):
        geocode = (vote.get("waypoint") or "").upper()
        if not geocode:
            continue
        try:
            rating = float(vote.get("voteAvg") or 0)
            votes = int(vote.get("voteCnt") or 0)
            my_vote = float(vote.get("voteUser") or 0)
        except ValueError:
            logger.debug(f"Skipping malformed vote for {geocode}")
            continue
        if votes <= 0:
            continue
        ratings[geocode] = CacheRating(geocode=geocode, rating=rating, votes=votes, my_vote=my_vote or None)
    return ratings


class GCVoteRatingsProvider:
    """Fetches ratings from GCVote for all caches of a search page in one request."""

    def __init__(self, transport: Transport, config: Config | None = None) -> None:
        self.transport = transport
        self.config = config or Config()

    def fetch_ratings(self, geocodes: Sequence[str]) -> dict[str, CacheRating]:
        form = {"version": APP_IDENTIFIER, "cacheIds": ",".join(geocodes)}
        if self.config.gcvote_username and self.config.gcvote_password:
            form["userName"] = self.config.gcvote_username
            form["password"] = self.config.gcvote_password.get_secret_value()

        with self.transport.request(self.config.gcvote_url, method="POST", body=RequestBody(form=form)) as response:
            if not 200 <= response.status_code < 300:
                raise APIError(response.status_code, "GCVote request failed", truncate(response.text))
            return parse_votes(response.text)

    def load_ratings(self, records: Sequence[NormalizedCacheRecord]) -> None:
        if not records:
            return

        ratings = self.fetch_ratings([r.geocode for r in records])
        for record in records:
            rating = ratings.get(record.geocode.upper())
            if rating is None:
                continue
            record.rating = rating.rating
            record.votes = rating.votes
            record.my_vote = rating.my_vote

        logger.debug(f"Loaded {len(ratings)} GCVote ratings for {len(records)} caches")

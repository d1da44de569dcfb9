"""
Tests for the require_ability dependency factory.
"""

from unittest.mock import AsyncMock, patch

import pytest

from src.domains.interests.abilities import ArchivedInterestRuleBuilder, InterestRuleBuilder
from src.domains.organisations.abilities import OrganisationRuleBuilder
from src.shared.abilities.dependencies import get_rule_builder, require_ability
from src.shared.abilities.exceptions import RuleBuildError
from src.shared.abilities.models import Ability, Action, Role, Session, Subject
from src.shared.abilities.services import can
from src.shared.exceptions import AbilityUnavailableError
from tests.fixtures.interest_fixtures import PROVIDER_ID


class TestGetRuleBuilder:
    def test_every_subject_has_a_builder(self, fake_db):
        assert isinstance(get_rule_builder(Subject.INTEREST, fake_db), InterestRuleBuilder)
        assert isinstance(
            get_rule_builder(Subject.ARCHIVED_INTEREST, fake_db),
            ArchivedInterestRuleBuilder,
        )
        assert isinstance(
            get_rule_builder(Subject.ORGANISATION, fake_db), OrganisationRuleBuilder
        )

    def test_archived_builder_looks_up_archived_opportunities(self, fake_db):
        builder = get_rule_builder(Subject.ARCHIVED_INTEREST, fake_db)

        assert builder.opportunities.model == "archivedopportunity"


class TestRequireAbility:
    """Test ability compilation as a FastAPI dependency."""

    @pytest.mark.asyncio
    async def test_compiles_ability_for_subject(self, fake_db, provider_session):
        compile_ability = require_ability(Subject.INTEREST)

        result = await compile_ability(session=provider_session, db=fake_db)

        assert isinstance(result, Ability)
        assert result.subject == Subject.INTEREST
        assert can(result, Action.READ, {"opportunity": "op-0"})
        assert not can(result, Action.READ, {"opportunity": "op-1"})
        assert fake_db.opportunity.last_where("find_many") == {"requestor": PROVIDER_ID}

    @pytest.mark.asyncio
    async def test_fresh_ability_per_call(self, fake_db, provider_session):
        """Test that ownership changes are visible to the next request."""
        compile_ability = require_ability(Subject.INTEREST)
        await compile_ability(session=provider_session, db=fake_db)

        fake_db.opportunity.get("op-1").requestor = PROVIDER_ID
        result = await compile_ability(session=provider_session, db=fake_db)

        assert can(result, Action.READ, {"opportunity": "op-1"})

    @pytest.mark.asyncio
    async def test_lookup_failure_maps_to_503(self, fake_db, provider_session):
        fake_db.opportunity.fail_with = ConnectionError("database unavailable")
        compile_ability = require_ability(Subject.INTEREST)

        with pytest.raises(AbilityUnavailableError) as exc_info:
            await compile_ability(session=provider_session, db=fake_db)

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, RuleBuildError)

    @pytest.mark.asyncio
    async def test_rule_build_error_maps_to_503(self, fake_db):
        session = Session(identity="p", roles=frozenset({Role.ADMIN}))
        error = RuleBuildError(Subject.ORGANISATION, Role.ADMIN)

        with patch(
            "src.shared.abilities.dependencies.build_ability",
            AsyncMock(side_effect=error),
        ):
            with pytest.raises(AbilityUnavailableError) as exc_info:
                await require_ability(Subject.ORGANISATION)(session=session, db=fake_db)

        assert exc_info.value.detail == "Unable to resolve permissions"

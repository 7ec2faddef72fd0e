"""
Tests for catalog entity create/update/delete
"""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from retrodex.app_services.catalog_service import CatalogService
from retrodex.app_services.compatibility_service import CompatibilityService
from retrodex.app_services.link_service import LinkService
from retrodex.app_services.performance_service import PerformanceService
from retrodex.exceptions import (
    ConflictException,
    DatabaseException,
    NotFoundException,
    ValidationException,
)
from retrodex.models import (
    AppLog,
    EmulationPerformance,
    Link,
    Tool,
    ToolConsoleCompatibility,
    ToolHandheldCompatibility,
)


class TestCreate:
    """Tests for CatalogService.create"""

    def test_slug_derived_from_name(self, app):
        console = CatalogService.create('console', {'name': 'Nintendo 64', 'release_year': '1996'})
        assert console.slug == 'nintendo-64'
        assert console.release_year == 1996
        assert len(console.id) == 36

    def test_supplied_slug_used_after_trimming(self, app):
        console = CatalogService.create('console', {'name': 'Nintendo 64', 'slug': '  n64  '})
        assert console.slug == 'n64'

    def test_name_required(self, app):
        with pytest.raises(ValidationException) as exc:
            CatalogService.create('console', {'name': '   ', 'manufacturer': 'Nintendo'})
        assert exc.value.field == 'name'

    def test_unknown_entity_type(self, app):
        with pytest.raises(NotFoundException):
            CatalogService.create('spaceship', {'name': 'X'})

    def test_duplicate_slug_is_a_conflict(self, app, sample_console):
        with pytest.raises(ConflictException) as exc:
            CatalogService.create('console', {'name': 'Super Nintendo!'})
        assert 'UNIQUE' in exc.value.message.upper()

    def test_blank_optional_fields_stored_as_null(self, app):
        console = CatalogService.create('console', {'name': 'Neo Geo', 'manufacturer': '  ', 'release_year': 'n/a'})
        assert console.manufacturer is None
        assert console.release_year is None

    def test_admin_write_is_recorded(self, app):
        CatalogService.create('console', {'name': 'Atari 2600'})
        assert AppLog.query.filter(AppLog.message.like('Created console%')).count() == 1


class TestGameRules:
    """Games need an existing console"""

    def test_console_required(self, app):
        with pytest.raises(ValidationException) as exc:
            CatalogService.create('game', {'name': 'Tetris'})
        assert exc.value.field == 'console_id'

    def test_console_must_exist(self, app):
        with pytest.raises(ValidationException):
            CatalogService.create('game', {'name': 'Tetris', 'console_id': 'missing'})

    def test_create(self, sample_game, sample_console):
        assert sample_game.console_id == sample_console.id
        assert sample_game.console.name == 'Super Nintendo'
        assert sample_game.release_year == 1995


class TestEmulatorRules:
    """Emulators target one or more consoles"""

    def test_comma_separated_console_ids(self, app, sample_consoles):
        ids = [c.id for c in sample_consoles[:2]]
        emulator = CatalogService.create('emulator', {'name': 'Genesis Plus GX', 'console_ids': ', '.join(ids)})
        assert emulator.console_ids == ids
        assert emulator.console_id == ids[0]
        assert emulator.recommended is False

    def test_json_console_ids(self, app, sample_consoles):
        ids = [sample_consoles[2].id, sample_consoles[0].id]
        emulator = CatalogService.create('emulator', {'name': 'Mednafen', 'console_ids': ids, 'recommended': True})
        assert emulator.console_ids == ids
        assert emulator.console_id == sample_consoles[2].id
        assert emulator.recommended is True

    def test_at_least_one_console(self, app):
        with pytest.raises(ValidationException) as exc:
            CatalogService.create('emulator', {'name': 'Nothing', 'console_ids': ''})
        assert exc.value.field == 'console_ids'

    def test_unknown_console(self, app, sample_console):
        with pytest.raises(ValidationException):
            CatalogService.create('emulator', {'name': 'Ghost', 'console_ids': f'{sample_console.id},nope'})

    def test_recommended_from_form_value(self, sample_emulator):
        assert sample_emulator.recommended is True
        assert sample_emulator.supported_platforms == ['Windows', 'Linux', 'Android']

    def test_update_console_ids_moves_primary(self, sample_emulator, sample_consoles):
        updated = CatalogService.update('emulator', sample_emulator.id, {'console_ids': [sample_consoles[1].id]})
        assert updated.console_id == sample_consoles[1].id


class TestCustomFirmwareRules:
    """Custom firmware slugs never collide"""

    def test_unique_slug_suffixes(self, app):
        first = CatalogService.create('custom_firmware', {'name': 'Onion OS'})
        second = CatalogService.create('custom_firmware', {'name': 'Onion OS'})
        third = CatalogService.create('custom_firmware', {'name': 'Onion-OS'})
        assert [first.slug, second.slug, third.slug] == ['onion-os', 'onion-os-1', 'onion-os-2']

    def test_default_installation_difficulty(self, sample_firmware):
        assert sample_firmware.installation_difficulty == 'intermediate'
        assert sample_firmware.features == ['Themes', 'RetroArch']

    def test_explicit_installation_difficulty(self, app):
        cfw = CatalogService.create('custom_firmware', {'name': 'ArkOS', 'installation_difficulty': 'Easy'})
        assert cfw.installation_difficulty == 'Easy'

    def test_rename_onto_taken_name_gets_suffix(self, app, sample_firmware):
        other = CatalogService.create('custom_firmware', {'name': 'GarlicOS'})
        renamed = CatalogService.update('custom_firmware', other.id, {'name': 'muOS'})
        assert renamed.slug == 'muos-1'
        assert CatalogService.get('custom_firmware', sample_firmware.id).slug == 'muos'

    def test_rename_to_own_name_keeps_slug(self, sample_firmware):
        renamed = CatalogService.update('custom_firmware', sample_firmware.id, {'name': 'muOS'})
        assert renamed.slug == 'muos'


class TestToolDownloadLink:
    """A tool's download_url becomes its primary Download link"""

    def test_download_link_created(self, app):
        tool = CatalogService.create('tool', {'name': 'RetroArch', 'download_url': 'https://retroarch.com/download'})
        links = LinkService.for_entity('tool', tool.id)
        assert len(links) == 1
        assert links[0].name == 'Download'
        assert links[0].link_type == 'download'
        assert links[0].is_primary is True
        assert links[0].display_order == 0

    def test_update_replaces_download_url(self, sample_tool):
        CatalogService.update('tool', sample_tool.id, {'download_url': 'https://a.example/v1'})
        CatalogService.update('tool', sample_tool.id, {'download_url': 'https://a.example/v2'})
        links = LinkService.for_entity('tool', sample_tool.id)
        assert [link.url for link in links] == ['https://a.example/v2']

    def test_failed_link_leaves_no_tool(self, app):
        failure = OperationalError('INSERT INTO links', {}, Exception('disk I/O error'))
        with patch('retrodex.app_services.catalog_service._save_download_link', side_effect=failure):
            with pytest.raises(DatabaseException):
                CatalogService.create('tool', {'name': 'Half Made', 'download_url': 'https://x.example'})

        assert Tool.query.filter_by(slug='half-made').count() == 0
        assert Link.query.count() == 0

    def test_array_fields(self, sample_tool):
        assert sample_tool.category == ['Scraping', 'ROM Management']
        assert sample_tool.features is None


class TestUpdate:
    """Tests for CatalogService.update"""

    def test_partial_update_keeps_other_fields(self, sample_console):
        updated = CatalogService.update('console', sample_console.id, {'description': 'Updated'})
        assert updated.description == 'Updated'
        assert updated.manufacturer == 'Nintendo'
        assert updated.slug == 'super-nintendo'

    def test_new_name_rederives_slug(self, sample_console):
        updated = CatalogService.update('console', sample_console.id, {'name': 'Super Famicom'})
        assert updated.slug == 'super-famicom'

    def test_supplied_slug_wins(self, sample_console):
        updated = CatalogService.update('console', sample_console.id, {'name': 'Super Famicom', 'slug': 'sfc'})
        assert updated.slug == 'sfc'

    def test_blank_name_rejected(self, sample_console):
        with pytest.raises(ValidationException):
            CatalogService.update('console', sample_console.id, {'name': ''})

    def test_missing_row(self, app):
        with pytest.raises(NotFoundException):
            CatalogService.update('console', 'missing', {'name': 'X'})

    def test_slug_collision_on_update(self, sample_consoles):
        with pytest.raises(ConflictException):
            CatalogService.update('console', sample_consoles[1].id, {'name': 'Super Nintendo'})


class TestDelete:
    """Tests for CatalogService.delete"""

    def test_delete_then_read_is_not_found(self, sample_console):
        CatalogService.delete('console', sample_console.id)
        with pytest.raises(NotFoundException):
            CatalogService.get('console', sample_console.id)
        with pytest.raises(NotFoundException):
            CatalogService.get_by_slug('console', 'super-nintendo')

    def test_delete_missing(self, app):
        with pytest.raises(NotFoundException):
            CatalogService.delete('handheld', 'missing')

    def test_delete_removes_dependents(self, sample_console, sample_handheld, sample_tool):
        LinkService.create({'entity_type': 'handheld', 'entity_id': sample_handheld.id,
                            'name': 'Review', 'url': 'https://example.com/review'})
        CompatibilityService.add('tool-handheld', {'tool_id': sample_tool.id, 'handheld_id': sample_handheld.id})
        CompatibilityService.add('tool-console', {'tool_id': sample_tool.id, 'console_id': sample_console.id})
        PerformanceService.create({'handheld_id': sample_handheld.id, 'console_id': sample_console.id,
                                   'performance_rating': 'excellent'})

        CatalogService.delete('handheld', sample_handheld.id)

        assert Link.query.filter_by(entity_type='handheld').count() == 0
        assert ToolHandheldCompatibility.query.count() == 0
        assert EmulationPerformance.query.count() == 0
        # Rows of other entities are untouched
        assert ToolConsoleCompatibility.query.count() == 1
        assert CatalogService.get('tool', sample_tool.id).name == 'Skraper'

    def test_console_with_games_cannot_be_deleted(self, sample_game, sample_console):
        with pytest.raises(ConflictException):
            CatalogService.delete('console', sample_console.id)
        assert CatalogService.get('console', sample_console.id)

    def test_failed_delete_rolls_back(self, sample_tool):
        LinkService.create({'entity_type': 'tool', 'entity_id': sample_tool.id,
                            'name': 'Home', 'url': 'https://skraper.net'})
        failure = OperationalError('DELETE FROM tools', {}, Exception('database is locked'))
        with patch('retrodex.repositories.tool_repository.ToolRepository.delete', side_effect=failure):
            with pytest.raises(DatabaseException):
                CatalogService.delete('tool', sample_tool.id)

        assert Link.query.filter_by(entity_id=sample_tool.id).count() == 1
        assert CatalogService.get('tool', sample_tool.id)

    def test_deleted_console_leaves_emulator_console_lists(self, app, sample_consoles):
        snes, mega_drive, _ = sample_consoles
        emulator = CatalogService.create('emulator', {'name': 'RetroArch',
                                                      'console_ids': [snes.id, mega_drive.id]})

        CatalogService.delete('console', mega_drive.id)

        emulator = CatalogService.get('emulator', emulator.id)
        assert emulator.console_ids == [snes.id]
        assert emulator.console_id == snes.id
        # The stored list is valid input again
        updated = CatalogService.update('emulator', emulator.id, {'console_ids': emulator.console_ids})
        assert updated.console_ids == [snes.id]


class TestList:
    """Tests for CatalogService.list"""

    def test_search_and_pagination(self, sample_consoles):
        page = CatalogService.list('console', page=1, per_page=2)
        assert page.total == 3
        assert [c.name for c in page.items] == ['Mega Drive', 'PlayStation']

        page = CatalogService.list('console', query_text='nin')
        assert [c.name for c in page.items] == ['Super Nintendo']

    def test_search_matches_manufacturer(self, sample_consoles):
        page = CatalogService.list('console', query_text='SONY')
        assert [c.name for c in page.items] == ['PlayStation']

    def test_like_wildcards_are_literal(self, sample_consoles):
        assert CatalogService.list('console', query_text='%').total == 0

    def test_equality_filter(self, sample_consoles):
        page = CatalogService.list('console', filters={'manufacturer': 'Sega', 'unknown': 'x'})
        assert [c.name for c in page.items] == ['Mega Drive']

    def test_sort_desc(self, sample_consoles):
        page = CatalogService.list('console', sort_by='release_year', order='desc')
        assert [c.release_year for c in page.items] == [1994, 1990, 1988]

    def test_array_filter(self, sample_emulator, sample_console, sample_consoles):
        page = CatalogService.list('emulator', filters={'console_ids': sample_console.id})
        assert [e.name for e in page.items] == ['Snes9x']
        page = CatalogService.list('emulator', filters={'console_ids': sample_consoles[1].id})
        assert page.total == 0

    def test_boolean_filter(self, sample_emulator):
        assert CatalogService.list('emulator', filters={'recommended': 'true'}).total == 1
        assert CatalogService.list('emulator', filters={'recommended': 'false'}).total == 0

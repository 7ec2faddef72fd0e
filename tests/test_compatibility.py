"""
Tests for compatibility join management
"""
import pytest

from retrodex.app_services.compatibility_service import CompatibilityService
from retrodex.exceptions import NotFoundException, ValidationException
from retrodex.models import COMPATIBILITY_RELATIONS, HandheldCustomFirmware, ToolHandheldCompatibility
from retrodex.models.compatibility import relations_for_entity


class TestRegistry:
    """Tests for the relation registry"""

    def test_every_relation_has_unique_pair(self):
        for relation in COMPATIBILITY_RELATIONS.values():
            constraints = [c for c in relation.model.__table__.constraints if c.__class__.__name__ == 'UniqueConstraint']
            assert len(constraints) == 1
            assert {col.name for col in constraints[0].columns} == {relation.left.key, relation.right.key}

    def test_relations_for_entity(self):
        names = {(relation.name, side) for relation, side in relations_for_entity('handheld')}
        assert ('tool-handheld', 'right') in names
        assert ('handheld-custom-firmware', 'left') in names
        assert ('emulator-handheld', 'right') in names
        assert len(names) == 5


class TestAdd:
    """Tests for CompatibilityService.add"""

    def test_add_creates_row(self, sample_tool, sample_handheld):
        row, created = CompatibilityService.add('tool-handheld', {
            'tool_id': sample_tool.id,
            'handheld_id': sample_handheld.id,
            'compatibility_notes': 'Works over Wi-Fi',
        })
        assert created is True
        assert row.tool_id == sample_tool.id
        assert row.compatibility_notes == 'Works over Wi-Fi'

    def test_duplicate_add_is_idempotent(self, sample_tool, sample_handheld):
        data = {'tool_id': sample_tool.id, 'handheld_id': sample_handheld.id}
        first, created_first = CompatibilityService.add('tool-handheld', data)
        second, created_second = CompatibilityService.add('tool-handheld', dict(data, compatibility_notes='again'))

        assert created_first is True
        assert created_second is False
        assert second.id == first.id
        assert ToolHandheldCompatibility.query.count() == 1
        assert second.compatibility_notes is None

    def test_extra_fields(self, sample_handheld, sample_firmware):
        row, _ = CompatibilityService.add('handheld-custom-firmware', {
            'handheld_id': sample_handheld.id,
            'custom_firmware_id': sample_firmware.id,
            'status': 'supported',
            'install_notes': 'Flash to the SD card',
            'notes': 'Stable',
        })
        assert row.status == 'supported'
        assert row.install_notes == 'Flash to the SD card'
        assert row.compatibility_notes == 'Stable'

    def test_missing_side(self, sample_tool, sample_handheld):
        with pytest.raises(NotFoundException):
            CompatibilityService.add('tool-handheld', {'tool_id': sample_tool.id, 'handheld_id': 'missing'})

    def test_missing_id(self, sample_tool):
        with pytest.raises(ValidationException) as exc:
            CompatibilityService.add('tool-handheld', {'tool_id': sample_tool.id})
        assert exc.value.field == 'handheld_id'

    def test_unknown_relation(self, app):
        with pytest.raises(NotFoundException):
            CompatibilityService.add('tool-toaster', {})


class TestRemoveAndList:
    """Tests for remove, update and list_for"""

    def test_remove(self, sample_handheld, sample_firmware):
        row, _ = CompatibilityService.add('handheld-custom-firmware', {
            'handheld_id': sample_handheld.id,
            'custom_firmware_id': sample_firmware.id,
        })
        assert CompatibilityService.remove('handheld-custom-firmware', row.id) is True
        assert HandheldCustomFirmware.query.count() == 0

        with pytest.raises(NotFoundException):
            CompatibilityService.remove('handheld-custom-firmware', row.id)

    def test_update_extra_fields(self, sample_emulator, sample_handheld):
        row, _ = CompatibilityService.add('emulator-handheld', {
            'emulator_id': sample_emulator.id,
            'handheld_id': sample_handheld.id,
        })
        updated = CompatibilityService.update('emulator-handheld', row.id, {'performance_rating': 'good'})
        assert updated.performance_rating == 'good'

    def test_list_for_embeds_other_side(self, sample_tool, sample_handheld):
        CompatibilityService.add('tool-handheld', {'tool_id': sample_tool.id, 'handheld_id': sample_handheld.id})

        by_tool = CompatibilityService.list_for('tool-handheld', 'left', sample_tool.id)
        assert len(by_tool) == 1
        assert by_tool[0]['handheld']['name'] == 'Anbernic RG35XX Plus'
        assert 'tool' not in by_tool[0]

        by_handheld = CompatibilityService.list_for('tool-handheld', 'right', sample_handheld.id)
        assert by_handheld[0]['tool']['slug'] == 'skraper'

    def test_list_for_keeps_insertion_order(self, sample_cfw_app, sample_firmware):
        from retrodex.app_services.catalog_service import CatalogService

        second = CatalogService.create('custom_firmware', {'name': 'GarlicOS'})
        CompatibilityService.add('cfw-app-custom-firmware', {'cfw_app_id': sample_cfw_app.id,
                                                             'custom_firmware_id': sample_firmware.id})
        CompatibilityService.add('cfw-app-custom-firmware', {'cfw_app_id': sample_cfw_app.id,
                                                             'custom_firmware_id': second.id})

        rows = CompatibilityService.list_for('cfw-app-custom-firmware', 'left', sample_cfw_app.id)
        assert [row['custom_firmware']['name'] for row in rows] == ['muOS', 'GarlicOS']

    def test_invalid_side(self, sample_tool):
        with pytest.raises(ValidationException):
            CompatibilityService.list_for('tool-handheld', 'middle', sample_tool.id)

    def test_for_entity(self, sample_game, sample_emulator, sample_handheld):
        CompatibilityService.add('game-emulator', {'game_id': sample_game.id, 'emulator_id': sample_emulator.id,
                                                   'status': 'perfect'})
        CompatibilityService.add('game-handheld', {'game_id': sample_game.id, 'handheld_id': sample_handheld.id})

        lists = CompatibilityService.for_entity('game', sample_game.id)
        assert set(lists) == {'tool-game', 'game-emulator', 'game-handheld'}
        assert lists['game-emulator'][0]['emulator']['name'] == 'Snes9x'
        assert lists['game-emulator'][0]['status'] == 'perfect'
        assert lists['tool-game'] == []

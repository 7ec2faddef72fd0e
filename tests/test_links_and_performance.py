"""
Tests for entity links and emulation performance rows
"""
import pytest

from retrodex.app_services.link_service import LinkService
from retrodex.app_services.performance_service import PerformanceService
from retrodex.exceptions import ConflictException, NotFoundException, ValidationException


class TestLinks:
    """Tests for LinkService"""

    def test_create_with_defaults(self, sample_console):
        link = LinkService.create({
            'entity_type': 'console',
            'entity_id': sample_console.id,
            'name': 'Wikipedia',
            'url': 'https://en.wikipedia.org/wiki/Super_Nintendo_Entertainment_System',
        })
        assert link.link_type == 'general'
        assert link.is_primary is False
        assert link.display_order == 0

    def test_title_alias(self, sample_console):
        link = LinkService.create({'entity_type': 'console', 'entity_id': sample_console.id,
                                   'title': 'Manual', 'url': 'https://example.com/manual.pdf'})
        assert link.name == 'Manual'

    def test_invalid_display_order_becomes_zero(self, sample_console):
        link = LinkService.create({'entity_type': 'console', 'entity_id': sample_console.id,
                                   'name': 'Shop', 'url': 'https://example.com', 'display_order': 'first'})
        assert link.display_order == 0

    def test_ordered_by_display_order(self, sample_handheld):
        for name, order in (('Third', '3'), ('First', '1'), ('Second', 2)):
            LinkService.create({'entity_type': 'handheld', 'entity_id': sample_handheld.id,
                                'name': name, 'url': f'https://example.com/{name}', 'display_order': order})
        links = LinkService.for_entity('handheld', sample_handheld.id)
        assert [link.name for link in links] == ['First', 'Second', 'Third']

    def test_unknown_entity_type(self, app):
        with pytest.raises(ValidationException) as exc:
            LinkService.create({'entity_type': 'toaster', 'entity_id': 'x', 'name': 'a', 'url': 'b'})
        assert exc.value.field == 'entity_type'

    def test_entity_must_exist(self, app):
        with pytest.raises(NotFoundException):
            LinkService.create({'entity_type': 'tool', 'entity_id': 'missing', 'name': 'a', 'url': 'b'})

    @pytest.mark.parametrize('missing', ['name', 'url'])
    def test_required_fields(self, sample_console, missing):
        data = {'entity_type': 'console', 'entity_id': sample_console.id, 'name': 'Docs', 'url': 'https://x'}
        data[missing] = ' '
        with pytest.raises(ValidationException) as exc:
            LinkService.create(data)
        assert exc.value.field == missing

    def test_update_and_delete(self, sample_console):
        link = LinkService.create({'entity_type': 'console', 'entity_id': sample_console.id,
                                   'name': 'Docs', 'url': 'https://x'})
        updated = LinkService.update(link.id, {'link_type': '', 'is_primary': 'on', 'display_order': '5'})
        assert updated.link_type == 'general'
        assert updated.is_primary is True
        assert updated.display_order == 5
        assert updated.name == 'Docs'

        assert LinkService.delete(link.id) is True
        assert LinkService.for_entity('console', sample_console.id) == []
        with pytest.raises(NotFoundException):
            LinkService.update(link.id, {'name': 'Gone'})


class TestEmulationPerformance:
    """Tests for PerformanceService"""

    def test_create(self, sample_handheld, sample_console):
        row = PerformanceService.create({
            'handheld_id': sample_handheld.id,
            'console_id': sample_console.id,
            'performance_rating': 'Excellent',
            'fps_range': '60',
            'tested_games': 'Chrono Trigger, Super Metroid',
        })
        assert row.performance_rating == 'excellent'
        assert row.tested_games == ['Chrono Trigger', 'Super Metroid']

    def test_invalid_rating(self, sample_handheld, sample_console):
        with pytest.raises(ValidationException) as exc:
            PerformanceService.create({'handheld_id': sample_handheld.id, 'console_id': sample_console.id,
                                       'performance_rating': 'amazing'})
        assert exc.value.field == 'performance_rating'

    def test_missing_console(self, sample_handheld):
        with pytest.raises(NotFoundException):
            PerformanceService.create({'handheld_id': sample_handheld.id, 'console_id': 'missing',
                                       'performance_rating': 'good'})

    def test_handheld_rows_best_first(self, sample_handheld, sample_consoles):
        ratings = ['poor', 'excellent', 'playable']
        for console, rating in zip(sample_consoles, ratings):
            PerformanceService.create({'handheld_id': sample_handheld.id, 'console_id': console.id,
                                       'performance_rating': rating})

        rows = PerformanceService.for_handheld(sample_handheld.id)
        assert [row.performance_rating for row in rows] == ['excellent', 'playable', 'poor']

    def test_update_and_delete(self, sample_handheld, sample_console):
        row = PerformanceService.create({'handheld_id': sample_handheld.id, 'console_id': sample_console.id,
                                         'performance_rating': 'good'})
        updated = PerformanceService.update(row.id, {'performance_rating': 'poor', 'notes': 'Audio crackles'})
        assert updated.performance_rating == 'poor'
        assert updated.notes == 'Audio crackles'

        PerformanceService.delete(row.id)
        assert PerformanceService.for_handheld(sample_handheld.id) == []

    def test_one_row_per_pair(self, sample_handheld, sample_console):
        payload = {'handheld_id': sample_handheld.id, 'console_id': sample_console.id, 'performance_rating': 'good'}
        PerformanceService.create(payload)

        with pytest.raises(ConflictException):
            PerformanceService.create(dict(payload, performance_rating='poor'))
        assert [row.performance_rating for row in PerformanceService.for_handheld(sample_handheld.id)] == ['good']

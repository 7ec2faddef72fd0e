"""
Pytest fixtures and configuration for RetroDex tests
"""
import os
import tempfile

import pytest

# Point config and data at a throwaway directory before retrodex is imported
_TEST_ROOT = tempfile.mkdtemp(prefix='retrodex-tests-')
os.environ['RETRODEX_CONFIG_DIR'] = os.path.join(_TEST_ROOT, 'config')
os.environ['RETRODEX_DATA_DIR'] = os.path.join(_TEST_ROOT, 'data')
os.environ.pop('DATABASE_URL', None)


@pytest.fixture(scope='session')
def app_config():
    """App configuration for tests: in-memory SQLite, no rate limits"""
    return {
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'RATELIMIT_ENABLED': False,
    }


@pytest.fixture
def app(app_config):
    """Application built by the factory with a fresh database"""
    from retrodex.app import create_app
    from retrodex.db import db

    _app = create_app(app_config)
    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client bound to the app fixture"""
    return app.test_client()


@pytest.fixture
def admin_token(monkeypatch):
    """Configure an admin API token for the duration of a test"""
    import copy
    from retrodex.middleware import auth
    from retrodex.settings import load_settings

    settings = copy.deepcopy(load_settings())
    settings['admin']['api_token'] = 's3cret-token'
    monkeypatch.setattr(auth, 'load_settings', lambda: settings)
    return 's3cret-token'


@pytest.fixture
def sample_console(app):
    """A persisted console"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('console', {
        'name': 'Super Nintendo',
        'manufacturer': 'Nintendo',
        'release_year': '1990',
        'description': '16-bit home console',
    })


@pytest.fixture
def sample_consoles(app, sample_console):
    """Two more consoles alongside sample_console"""
    from retrodex.app_services.catalog_service import CatalogService

    return [
        sample_console,
        CatalogService.create('console', {'name': 'Mega Drive', 'manufacturer': 'Sega', 'release_year': 1988}),
        CatalogService.create('console', {'name': 'PlayStation', 'manufacturer': 'Sony', 'release_year': 1994}),
    ]


@pytest.fixture
def sample_game(app, sample_console):
    """A persisted game on sample_console"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('game', {
        'name': 'Chrono Trigger',
        'console_id': sample_console.id,
        'developer': 'Square',
        'genre': 'RPG',
        'release_year': '1995',
    })


@pytest.fixture
def sample_emulator(app, sample_console):
    """A recommended emulator for sample_console"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('emulator', {
        'name': 'Snes9x',
        'console_ids': sample_console.id,
        'supported_platforms': 'Windows, Linux, Android',
        'recommended': 'true',
    })


@pytest.fixture
def sample_handheld(app):
    """A persisted handheld"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('handheld', {
        'name': 'Anbernic RG35XX Plus',
        'manufacturer': 'Anbernic',
        'price': '64.99',
        'connectivity': '["Wi-Fi", "Bluetooth"]',
        'operating_system': 'Linux',
    })


@pytest.fixture
def sample_tool(app):
    """A persisted tool"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('tool', {
        'name': 'Skraper',
        'developer': 'Skraper Team',
        'category': 'Scraping, ROM Management',
    })


@pytest.fixture
def sample_firmware(app):
    """A persisted custom firmware"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('custom_firmware', {
        'name': 'muOS',
        'features': '["Themes", "RetroArch"]',
        'license': 'GPL-3.0',
    })


@pytest.fixture
def sample_cfw_app(app):
    """A persisted CFW app"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('cfw_app', {
        'name': 'PortMaster',
        'developers': 'kloptops, Christian Haitian',
    })


@pytest.fixture
def sample_port(app):
    """A persisted PortMaster port"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('portmaster_port', {
        'name': 'Stardew Valley',
        'genre': 'Simulation, RPG',
        'ready_to_run': 'false',
        'necessary_files': 'Content/',
        'purchase_links': '[{"label": "GOG", "url": "https://www.gog.com/game/stardew_valley"}]',
    })


@pytest.fixture
def sample_setup(app, sample_firmware, sample_emulator):
    """A setup guide built from sample_firmware and sample_emulator"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('setup', {
        'title': 'muOS from scratch',
        'description': 'Flash muOS and configure Snes9x',
        'guide_content': '1. Flash the card\n2. Boot the device',
        'tags': 'muOS, beginner',
        'components': [
            {'component_type': 'custom_firmware', 'component_id': sample_firmware.id},
            {'component_type': 'emulator', 'component_id': sample_emulator.id, 'is_required': False},
        ],
    })


@pytest.fixture
def sample_preset(app, sample_handheld, sample_emulator, sample_game):
    """A public preset for sample_handheld"""
    from retrodex.app_services.catalog_service import CatalogService

    return CatalogService.create('preset', {
        'name': 'SNES Pocket',
        'handheld_id': sample_handheld.id,
        'created_by': 'retro_fan',
        'items': [
            {'item_type': 'emulator', 'item_id': sample_emulator.id},
            {'item_type': 'game', 'item_id': sample_game.id, 'notes': 'Start here'},
        ],
    })

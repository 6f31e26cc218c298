import json

import pytest

from rifa_boletas import main
from rifa_boletas.config import Settings
from rifa_boletas.errors import StorageError, ValidationError
from rifa_boletas.models import RaffleConfig


def test_defaults(container):
    config = container.config_service.get_config()
    assert config['nombreRifa'] == 'Rifas El Gran Camión'
    assert config['precioBoleta'] == 120000
    assert config['totalBoletas'] == 10000
    assert config['smtpPort'] == 587
    assert config['smtpHost'] == ''


def test_partial_update_leaves_other_fields(container):
    before = container.config_service.get_config()
    after = container.config_service.update_config({'precioBoleta': 999})

    assert after['precioBoleta'] == 999
    assert {k: v for k, v in after.items() if k != 'precioBoleta'} == \
        {k: v for k, v in before.items() if k != 'precioBoleta'}

    container.store.clear_cache()
    assert container.config_repo.get().precio_boleta == 999


def test_numeric_strings_are_coerced(container):
    config = container.config_service.update_config({'precioBoleta': '5000', 'smtpPort': '465'})
    assert config['precioBoleta'] == 5000
    assert config['smtpPort'] == 465
    assert container.config_service.update_config({'precioBoleta': '7000.0'})['precioBoleta'] == 7000


@pytest.mark.parametrize('value', ['mucho', True, None, '120000.9', 120000.5, 'inf'])
def test_invalid_numeric_value(container, value):
    with pytest.raises(ValidationError):
        container.config_service.update_config({'precioBoleta': value})
    assert container.config_service.get_config()['precioBoleta'] == 120000


def test_update_requires_object(container):
    with pytest.raises(ValidationError):
        container.config_service.update_config(['precioBoleta'])


def test_unknown_keys_are_kept(container):
    config = container.config_service.update_config({'colorTema': 'oscuro'})
    assert config['colorTema'] == 'oscuro'
    assert container.config_repo.get().extra == {'colorTema': 'oscuro'}


def test_saved_config_is_merged_with_defaults(container):
    with open(container.store.path_for('config'), 'w', encoding='utf-8') as f:
        json.dump({'nombreRifa': 'Rifa vieja'}, f)
    container.store.clear_cache()

    config = container.config_repo.get()
    assert config.nombre_rifa == 'Rifa vieja'
    assert config.precio_boleta == 120000


def test_corrupt_numeric_value_on_disk(container):
    with open(container.store.path_for('config'), 'w', encoding='utf-8') as f:
        json.dump({'precioBoleta': 'abc'}, f)
    container.store.clear_cache()

    with pytest.raises(StorageError):
        container.config_repo.get()


def test_smtp_configured():
    assert not RaffleConfig().smtp_configured
    assert RaffleConfig(smtp_host='smtp.test', smtp_user='u@test', smtp_pass='x').smtp_configured


def test_public_dict_has_no_smtp_data():
    public = RaffleConfig(smtp_pass='secreto').public_dict()
    assert 'smtpPass' not in public
    assert public['precioBoleta'] == 120000


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv('RIFA_DATA_DIR', str(tmp_path / 'datos'))
    monkeypatch.setenv('RIFA_PUBLIC_URL', 'https://rifa.example.com/')
    monkeypatch.setenv('RIFA_NOTIFY_TIMEOUT', '5')
    monkeypatch.setenv('RIFA_ENABLE_PROFILING', 'no')
    monkeypatch.setenv('PORT', 'abc')

    settings = Settings.from_env()
    assert settings.data_dir == str(tmp_path / 'datos')
    assert settings.public_url == 'https://rifa.example.com'
    assert settings.notify_timeout == 5.0
    assert settings.enable_profiling is False
    assert settings.port == 3000


def test_settings_round_trip_through_flask_config(tmp_path):
    settings = Settings(data_dir=str(tmp_path), logs_dir=str(tmp_path / 'logs'), port=8080)
    assert Settings.from_flask_config(settings.to_flask_config()) == settings


def test_testing_app_leaves_close_to_caller(monkeypatch, tmp_path):
    registered = []
    monkeypatch.setattr(main.atexit, 'register', registered.append)
    overrides = {'RIFA_DATA_DIR': str(tmp_path / 'data'), 'RIFA_LOGS_DIR': str(tmp_path / 'logs')}

    app = main.create_app({**overrides, 'TESTING': True})
    app.extensions['rifa'].close()
    assert registered == []

    app = main.create_app(overrides)
    app.extensions['rifa'].close()
    assert registered == [app.extensions['rifa'].close]

from core.config import Settings


def test_settings_padrao():
    config = Settings(_env_file=None)

    assert config.DATABASE_URL == "sqlite:///./financas.db"
    assert config.LIMIAR_DELTA_PERCENTUAL == 5.0
    assert config.LIMIAR_TAXA_APROVACAO == 90.0


def test_settings_le_variaveis_de_ambiente(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("LIMIAR_DELTA_PERCENTUAL", "2.5")
    monkeypatch.setenv("log_level", "DEBUG")

    config = Settings(_env_file=None)

    assert config.LIMIAR_DELTA_PERCENTUAL == 2.5
    # chaves diferenciam maiusculas
    assert config.LOG_LEVEL == "INFO"


def test_settings_model_config():
    assert Settings.model_config["env_file"] == ".env"
    assert Settings.model_config["case_sensitive"] is True

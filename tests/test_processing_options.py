import pytest

from chunkwise.config import ProcessingOptions, load_processing_options
from chunkwise.errors import ConfigurationError


def test_defaults():
    options = ProcessingOptions()
    assert options.use_parallel_processing is True
    assert options.max_concurrency is None
    assert options.chunk_size == 10_000
    assert options.max_retries == 3
    assert options.preserve_original_order is True


def test_resolve_concurrency():
    assert ProcessingOptions().resolve_concurrency(2) == 2
    assert ProcessingOptions().resolve_concurrency(10) == 4
    assert ProcessingOptions().resolve_concurrency(0) == 1
    assert ProcessingOptions(max_concurrency=7).resolve_concurrency(2) == 7


def test_max_concurrency_is_clamped():
    assert ProcessingOptions(max_concurrency=0).max_concurrency == 1
    assert ProcessingOptions(max_concurrency=-3).max_concurrency == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"chunk_size": 0},
        {"max_retries": 0},
        {"retry_delay_base": -1.0},
        {"memory_budget_bytes": 0},
    ],
)
def test_invalid_options_raise(kwargs):
    with pytest.raises(ConfigurationError):
        ProcessingOptions(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"chunk_size": 10.0},
        {"chunk_size": "500"},
        {"max_retries": 2.5},
        {"max_retries": True},
        {"memory_budget_bytes": 1e9},
        {"max_concurrency": 2.0},
        {"retry_delay_base": "1"},
    ],
)
def test_wrong_option_types_raise(kwargs):
    with pytest.raises(ConfigurationError):
        ProcessingOptions(**kwargs)


def test_float_retry_delay_base_and_int_accepted():
    assert ProcessingOptions(retry_delay_base=2).retry_delay_base == 2
    assert ProcessingOptions(retry_delay_base=0.25).retry_delay_base == 0.25


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ProcessingOptions(chunk_size=-1)


def test_with_overrides_returns_copy():
    base = ProcessingOptions()
    changed = base.with_overrides(max_concurrency=2)
    assert changed.max_concurrency == 2
    assert base.max_concurrency is None


def test_from_mapping_accepts_camel_case():
    options = ProcessingOptions.from_mapping(
        {"maxConcurrency": 2, "chunkSize": 500, "useParallelProcessing": False, "max_retries": 5}
    )
    assert options.max_concurrency == 2
    assert options.chunk_size == 500
    assert options.use_parallel_processing is False
    assert options.max_retries == 5


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        ProcessingOptions.from_mapping({"chunk_sise": 10})


def test_from_mapping_empty():
    assert ProcessingOptions.from_mapping(None) == ProcessingOptions()


def test_load_processing_options(tmp_path):
    yaml_text = """
chunk_size: 50000
maxConcurrency: 2
enable_detailed_logging: true
"""
    cfg_path = tmp_path / "processing.yaml"
    cfg_path.write_text(yaml_text)
    options = load_processing_options(cfg_path)
    assert options.chunk_size == 50_000
    assert options.max_concurrency == 2
    assert options.enable_detailed_logging is True


def test_load_processing_options_from_section(tmp_path):
    yaml_text = """
processing:
  max_retries: 5
  retry_delay_base: 0.5
"""
    cfg_path = tmp_path / "app.yaml"
    cfg_path.write_text(yaml_text)
    options = load_processing_options(cfg_path)
    assert options.max_retries == 5
    assert options.retry_delay_base == 0.5


def test_load_processing_options_empty_file(tmp_path):
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("")
    assert load_processing_options(cfg_path) == ProcessingOptions()


def test_load_processing_options_rejects_non_mapping(tmp_path):
    cfg_path = tmp_path / "list.yaml"
    cfg_path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigurationError):
        load_processing_options(cfg_path)


@pytest.mark.parametrize(
    "yaml_text",
    [
        "max_retries: 2.5\n",
        "chunk_size: 1.0e+1\n",
        "chunk_size: '500'\n",
        "processing:\n  max_concurrency: four\n",
    ],
)
def test_load_processing_options_rejects_wrong_types(tmp_path, yaml_text):
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text(yaml_text)
    with pytest.raises(ConfigurationError):
        load_processing_options(cfg_path)

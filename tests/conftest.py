"""Shared fixtures for the opdoc test-suite."""

import pytest
from click.testing import CliRunner

from opdoc.config import ENV_OVERRIDES, UsageConfig
from opdoc.descriptors import (
    OperatorDescriptor,
    ParameterDescriptor,
    ScalarKind,
    SourceProductDescriptor,
    SourceProductsDescriptor,
    TargetPropertyDescriptor,
    array_of,
    scalar_type,
    structure_of,
)
from opdoc.registry import OperatorRegistry


@pytest.fixture(autouse=True)
def clean_opdoc_env(monkeypatch):
    """Keep OPDOC_* variables from the developer environment out of the tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def usage_config():
    return UsageConfig(
        tool_name="gpt",
        target_filepath="target.dim",
        format_name="BEAM-DIMAP",
        tile_cache_size_mb=512,
        tile_scheduler_parallelism=4,
    )


@pytest.fixture
def band_descriptor_type():
    return structure_of(
        "BandDescriptor",
        [
            ParameterDescriptor(name="name", data_type=scalar_type(ScalarKind.STRING)),
            ParameterDescriptor(name="expression", data_type=scalar_type(ScalarKind.STRING)),
        ],
    )


@pytest.fixture
def sample_operator(band_descriptor_type):
    """An operator using every kind of descriptor."""
    return OperatorDescriptor(
        name="SampleOp",
        alias="Sample",
        description="Does sample things.\nOn two lines.",
        operator_class="org.example.SampleOp",
        source_product_descriptors=(
            SourceProductDescriptor(name="sourceProduct", alias="source"),
            SourceProductDescriptor(
                name="auxProduct",
                description="Auxiliary data.",
                product_type="AUX_.*",
                optional=True,
            ),
        ),
        source_products_descriptor=SourceProductsDescriptor(name="sourceProducts", count=-1),
        parameter_descriptors=(
            ParameterDescriptor(
                name="threshold",
                data_type=scalar_type(ScalarKind.DOUBLE),
                interval="[0,1]",
                default_value="0.5",
            ),
            ParameterDescriptor(
                name="bandNames",
                alias="sourceBands",
                item_alias="band",
                data_type=array_of(scalar_type(ScalarKind.STRING)),
            ),
            ParameterDescriptor(
                name="targetBandDescriptors",
                alias="targetBands",
                item_alias="targetBand",
                data_type=array_of(band_descriptor_type),
            ),
        ),
        target_property_descriptors=(
            TargetPropertyDescriptor(
                name="pixelCount",
                data_type=scalar_type(ScalarKind.INT),
                description="Number of valid pixels.",
            ),
        ),
    )


@pytest.fixture
def sample_registry(sample_operator):
    internal = OperatorDescriptor(name="Hidden", internal=True, description="Not listed.")
    plain = OperatorDescriptor(name="Plain")
    return OperatorRegistry([sample_operator, internal, plain])

"""Unit tests for the barcode reader stage."""

import numpy as np
import pytest

from label_inspector.barcode.decoder import BarcodeDecoder, BarcodeResult
from label_inspector.barcode.reader import BarcodeReader
from label_inspector.common.config_loader import BarcodeConfig
from label_inspector.common.errors import StageFailure
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage, Rect


class RecordingDecoder(BarcodeDecoder):
    def __init__(self, data="2301703050457"):
        self.data = data
        self.received = []

    def decode(self, image, symbology):
        self.received.append((image, symbology))
        return BarcodeResult(data=self.data, symbology=symbology, success=True)


@pytest.fixture
def aligned():
    image = Image(np.arange(60 * 80, dtype=np.uint32).reshape(60, 80).astype(np.uint8))
    image.set_roi(Rect(x=10, y=10, width=20, height=20))
    return image


class TestBarcodeReader:
    """Test barcode decoding over the aligned frame."""

    def test_read(self, backend, fake_decoder, aligned):
        assert BarcodeReader(backend, fake_decoder).read(aligned) == "2301703X5045Y"
        assert fake_decoder.calls == 1
        assert backend.leaked == []

    def test_whole_frame_decoded(self, backend, aligned):
        decoder = RecordingDecoder()

        BarcodeReader(backend, decoder).read(aligned)

        pixels, symbology = decoder.received[0]
        assert pixels.shape == (60, 80)
        np.testing.assert_array_equal(pixels, aligned.data)
        assert symbology == "EAN13"

    def test_input_roi_kept(self, backend, aligned):
        roi = aligned.roi

        BarcodeReader(backend, RecordingDecoder()).read(aligned)

        assert aligned.roi == roi

    def test_nothing_decoded(self, backend, make_decoder, aligned):
        with pytest.raises(StageFailure) as exc_info:
            BarcodeReader(backend, make_decoder(None)).read(aligned)

        assert exc_info.value.message == "Barcode not found"
        assert exc_info.value.stage == PipelineStage.READ_BARCODE
        assert exc_info.value.constant == "BARCODE_NOT_FOUND"
        assert backend.leaked == []

    @pytest.mark.parametrize("data", ["230170305045", "23017030504571", ""])
    def test_wrong_length(self, backend, aligned, data):
        with pytest.raises(StageFailure):
            BarcodeReader(backend, RecordingDecoder(data)).read(aligned)

    def test_configured_symbology(self, backend, aligned):
        decoder = RecordingDecoder(data="12345678")
        config = BarcodeConfig(symbology="EAN8", expected_length=8)

        assert BarcodeReader(backend, decoder, config).read(aligned) == "12345678"
        assert decoder.received[0][1] == "EAN8"

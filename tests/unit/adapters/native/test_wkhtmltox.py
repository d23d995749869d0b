"""Tests for the ctypes wkhtmltox adapters over a mocked library."""
from ctypes import c_char_p, c_int, c_void_p
from unittest.mock import MagicMock

import pytest
from htmltox.adapters.native.wkhtmltox import (
    STR_CALLBACK,
    WkHtmlToImageAdapter,
    WkHtmlToPdfAdapter,
    create_bindings,
)
from htmltox.core.lifecycle import NativeBindings
from htmltox.core.ports.native import ImageRendererPort, PdfRendererPort


@pytest.fixture
def library():
    return MagicMock()


class TestSymbolBinding:
    def test_implements_ports(self, library):
        assert isinstance(WkHtmlToPdfAdapter(library), PdfRendererPort)
        assert isinstance(WkHtmlToImageAdapter(library), ImageRendererPort)

    def test_declares_signatures(self, library):
        WkHtmlToPdfAdapter(library)

        assert library.wkhtmltopdf_init.restype is c_int
        assert library.wkhtmltopdf_init.argtypes == [c_int]
        assert library.wkhtmltopdf_version.restype is c_char_p
        assert library.wkhtmltopdf_create_converter.argtypes == [c_void_p]
        assert library.wkhtmltopdf_add_object.argtypes == [c_void_p, c_void_p, c_char_p]

    def test_image_converter_takes_html(self, library):
        WkHtmlToImageAdapter(library)
        assert library.wkhtmltoimage_create_converter.argtypes == [c_void_p, c_char_p]

    def test_create_bindings(self, library):
        bindings = create_bindings(library, use_graphics=True)

        assert isinstance(bindings, NativeBindings)
        assert isinstance(bindings.pdf, WkHtmlToPdfAdapter)
        assert isinstance(bindings.image, WkHtmlToImageAdapter)
        assert bindings.use_graphics is True


class TestCalls:
    def test_init_passes_graphics_flag(self, library):
        library.wkhtmltopdf_init.return_value = 1
        adapter = WkHtmlToPdfAdapter(library)

        assert adapter.init(use_graphics=False) is True
        library.wkhtmltopdf_init.assert_called_once_with(0)

    def test_status_codes_become_bools(self, library):
        library.wkhtmltoimage_convert.return_value = 0
        library.wkhtmltoimage_set_global_setting.return_value = 1
        adapter = WkHtmlToImageAdapter(library)

        assert adapter.convert(7) is False
        assert adapter.set_global_setting(3, "fmt", "png") is True

    def test_strings_are_utf8(self, library):
        library.wkhtmltopdf_version.return_value = b"0.12.5 (with patched qt)"
        adapter = WkHtmlToPdfAdapter(library)

        adapter.add_object(1, 2, "<p>Grüße</p>")

        library.wkhtmltopdf_add_object.assert_called_once_with(1, 2, "<p>Grüße</p>".encode("utf-8"))
        assert adapter.version() == "0.12.5 (with patched qt)"

    def test_url_object_passes_null_html(self, library):
        adapter = WkHtmlToPdfAdapter(library)
        adapter.add_object(1, 2, None)
        library.wkhtmltopdf_add_object.assert_called_once_with(1, 2, None)

    def test_pdf_convert_uses_pdf_symbol(self, library):
        library.wkhtmltopdf_convert.return_value = 1
        adapter = WkHtmlToPdfAdapter(library)

        assert adapter.convert(5) is True
        library.wkhtmltopdf_convert.assert_called_once_with(5)
        library.wkhtmltoimage_convert.assert_not_called()

    def test_empty_output(self, library):
        library.wkhtmltopdf_get_output.return_value = 0
        adapter = WkHtmlToPdfAdapter(library)

        assert adapter.get_output(5) == b""


class TestCallbacks:
    def test_trampoline_decodes_and_forwards(self, library):
        adapter = WkHtmlToPdfAdapter(library)
        seen = []

        adapter.set_warning_callback(9, lambda c, message: seen.append(message))
        trampoline = library.wkhtmltopdf_set_warning_callback.call_args[0][1]
        trampoline(None, "Slow script".encode("utf-8"))

        assert isinstance(trampoline, STR_CALLBACK)
        assert seen == ["Slow script"]

    def test_trampoline_swallows_consumer_errors(self, library, caplog):
        adapter = WkHtmlToPdfAdapter(library)

        def broken(c, message):
            raise RuntimeError("consumer bug")

        adapter.set_error_callback(9, broken)
        trampoline = library.wkhtmltopdf_set_error_callback.call_args[0][1]
        trampoline(None, b"load failed")

        assert "consumer bug" in caplog.text

    def test_trampolines_released_on_destroy(self, library):
        adapter = WkHtmlToPdfAdapter(library)
        adapter.set_warning_callback(9, lambda c, m: None)
        adapter.set_finished_callback(9, lambda c, v: None)
        assert set(adapter._callbacks[9]) == {"warning", "finished"}

        adapter.destroy_converter(9)

        assert 9 not in adapter._callbacks
        library.wkhtmltopdf_destroy_converter.assert_called_once_with(9)

    def test_trampolines_released_when_destroy_raises(self, library):
        library.wkhtmltopdf_destroy_converter.side_effect = OSError("access violation")
        adapter = WkHtmlToPdfAdapter(library)
        adapter.set_warning_callback(9, lambda c, m: None)

        with pytest.raises(OSError):
            adapter.destroy_converter(9)
        assert 9 not in adapter._callbacks

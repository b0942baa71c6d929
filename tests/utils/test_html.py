"""
Tests for HTML text extraction.
"""

from ordertracker.utils.html import html_to_text, looks_like_html


def test_looks_like_html():
    assert looks_like_html("<p>Hello</p>")
    assert looks_like_html("<DIV class='x'>")
    assert not looks_like_html("Tracking: 1 < 2")
    assert not looks_like_html(None)


def test_html_to_text_drops_chrome():
    """Test scripts, styles and navigation are removed"""
    html = """
    <html>
    <head><title>Shipped</title><style>p { color: red; }</style></head>
    <body>
        <nav>Menu</nav>
        <p>Your order <b>1002</b> has shipped.</p>
        <script>console.log('x');</script>
        <footer>Unsubscribe</footer>
    </body>
    </html>
    """

    text = html_to_text(html)

    assert "Your order" in text
    assert "1002" in text
    assert "Menu" not in text
    assert "console.log" not in text
    assert "Unsubscribe" not in text
    assert "color: red" not in text

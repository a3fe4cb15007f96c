"""HTML documents served by mocked sites in crawler and extractor tests."""

SEED_URL = "https://example.com/"

SEED_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Example Home</title>
  <meta name="description" content="The example home page">
</head>
<body>
  <nav><a href="/nav-only">Navigation link</a></nav>
  <main>
    <h1 id="welcome">Welcome</h1>
    <p>Hello world from the seed page.</p>
    <a href="/a">Page A</a>
    <a href="/b#details">Page B</a>
    <a href="https://example.com/c">Page C</a>
    <a href="https://other.org/x">Elsewhere</a>
  </main>
</body>
</html>
"""


def page_html(title: str, links: list[str] | None = None, body: str = "") -> str:
    """Render a minimal page with a heading, some text and links."""
    anchors = "\n".join(f'<a href="{href}">{href}</a>' for href in links or [])
    return f"""<html>
<head><title>{title}</title></head>
<body>
  <main>
    <h2>{title} heading</h2>
    <p>{body or f"Content of {title}."}</p>
    {anchors}
  </main>
</body>
</html>
"""


ARTICLE_HTML = """<!DOCTYPE html>
<html lang="fr">
<head>
  <title>  Guide to Widgets  </title>
  <meta name="keywords" content="widgets, gadgets , ,tools">
  <meta property="og:description" content="All about widgets">
  <meta property="article:author" content="Jo Writer">
  <meta property="article:published_time" content="2024-03-01T10:00:00Z">
  <meta name="last-modified" content="2024-04-02">
  <link rel="canonical" href="https://docs.example.com/widgets">
  <style>.hidden { display: none; }</style>
  <script>var tracking = "should not appear";</script>
</head>
<body>
  <div class="header">Site header text</div>
  <aside>Sidebar advert</aside>
  <!-- a comment that should vanish -->
  <article>
    <h1 id="intro">Widgets</h1>
    <p>Widgets are small tools.</p>
    <h2>   </h2>
    <h3 id="usage">Usage</h3>
    <p>Use widgets <a href="/widgets/usage">carefully</a> and
       <a href="https://docs.example.com/widgets/usage">again</a>.</p>
    <a href="https://elsewhere.net/page">External</a>
    <a href="mailto:team@example.com">Mail us</a>
    <img src="/img/widget.png" alt="A widget" title="Widget picture">
    <img src="https://cdn.example.net/logo.svg">
  </article>
  <footer>Footer text</footer>
</body>
</html>
"""

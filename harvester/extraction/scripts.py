"""
JavaScript snippets evaluated inside the page.

Kept as module constants so they can be reused and recognized by test fakes.
"""

# Current document extent in pixels
SCROLL_HEIGHT_JS = r"""
() => (document.scrollingElement || document.documentElement || document.body).scrollHeight | 0
"""

# Scroll the viewport to the given extent
SCROLL_TO_JS = r"""
(height) => { window.scrollTo(0, height); }
"""

# Same-origin fetch of a JSON document; runs with the page's cookies
FETCH_JSON_JS = r"""
async (url) => {
  const res = await fetch(url, { credentials: "same-origin", headers: { "Accept": "application/json" } });
  if (!res.ok) {
    throw new Error(`fetch ${url} failed with status ${res.status}`);
  }
  return await res.json();
}
"""

# Hide the automation flag before any page script runs
HIDE_WEBDRIVER_JS = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"

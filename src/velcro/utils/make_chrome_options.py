from pydoll.browser.options import ChromiumOptions

async def make_chrome_options(headless: bool) -> ChromiumOptions:
    options = ChromiumOptions()
    if headless:
        options.add_argument("--headless=new")
    # previews are served from file:// URLs
    options.add_argument('--allow-file-access-from-files')
    options.add_argument('--disable-features=VizDisplayCompositor')
    return options

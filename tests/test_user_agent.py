"""Tests for the ordered user-agent classifier."""

from shortlink.services.user_agent import classify_user_agent

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.0.0"
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_2 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Mobile/15E148 Safari/604.1"
)
SAFARI_IPAD = SAFARI_IPHONE.replace("iPhone; CPU iPhone OS", "iPad; CPU OS")
IE11 = "Mozilla/5.0 (Windows NT 10.0; Trident/7.0; rv:11.0) like Gecko"


class TestClassifyUserAgent:
    def test_chrome_token_wins_over_safari_token(self):
        info = classify_user_agent(CHROME_WINDOWS)
        assert (info.browser, info.os, info.device) == ("Chrome", "Windows", "Desktop")

    def test_edge_is_matched_before_chrome(self):
        assert classify_user_agent(EDGE_WINDOWS).browser == "Edge"

    def test_firefox_on_linux(self):
        info = classify_user_agent(FIREFOX_LINUX)
        assert (info.browser, info.os, info.device) == ("Firefox", "Linux", "Desktop")

    def test_safari_on_macos(self):
        info = classify_user_agent(SAFARI_MAC)
        assert (info.browser, info.os) == ("Safari", "macOS")

    def test_android_is_matched_before_linux(self):
        info = classify_user_agent(CHROME_ANDROID)
        assert (info.os, info.device) == ("Android", "Mobile")

    def test_iphone_and_ipad_devices(self):
        iphone = classify_user_agent(SAFARI_IPHONE)
        ipad = classify_user_agent(SAFARI_IPAD)
        assert (iphone.os, iphone.device) == ("iOS", "Mobile")
        assert (ipad.os, ipad.device) == ("iOS", "Tablet")

    def test_internet_explorer(self):
        assert classify_user_agent(IE11).browser == "Internet Explorer"

    def test_unmatched_falls_back(self):
        info = classify_user_agent("curl/8.4.0")
        assert (info.browser, info.os, info.device) == ("Unknown", "Unknown", "Desktop")

    def test_missing_user_agent(self):
        for value in (None, ""):
            info = classify_user_agent(value)
            assert (info.browser, info.os, info.device) == ("Unknown", "Unknown", "Unknown")

LOGO = r"""
  ____ _____       _   _ _   _ _  _______
 / ___|___ /      | \ | | | | | |/ / ____|
 \___ \ |_ \ _____|  \| | | | | ' /|  _|
  ___) |__) |_____| |\  | |_| | . \| |___
 |____/____/      |_| \_|\___/|_|\_\_____|
"""

RELEASE_URL = "https://github.com/soapiestwaffles/s3-nuke/releases"

from ace7crypt.utils.constants import VERSION

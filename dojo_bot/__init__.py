# Telegram dojo training bot

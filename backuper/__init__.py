"""simple-backuper: scheduled shell-script backups uploaded to object storage."""

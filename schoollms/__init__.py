# Load PyMySQL as the MySQLdb driver before Django touches the database backend
import pymysql

pymysql.install_as_MySQLdb()
